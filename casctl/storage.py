"""Listing and describing storage entities: cStor pools, LVM volume groups, ZFS pools."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Callable, Iterable, Sequence

from casctl.constants import (
    BD_LIST_COLUMN_DEFINITIONS,
    CSTOR_CAS_TYPE,
    CSTOR_POOL_LIST_COLUMN_DEFINITIONS,
    LVM_CAS_TYPE,
    LVM_VOLGROUP_LIST_COLUMN_DEFINITIONS,
    POOL_REPLICA_COLUMN_DEFINITIONS,
    ZFS_CAS_TYPE,
    ZFS_POOL_LIST_COLUMN_DEFINITIONS,
    ColumnDefinition,
)
from casctl.types import PoolInfo
from casctl.units import Quantity, bytes_size
from casctl.util import (
    convert_to_ibytes,
    duration,
    get_used_percentage,
    print_by_template,
    table_printer,
)

FIRST_ELEM_PREFIX = "├─"
LAST_ELEM_PREFIX = "└─"

CSTOR_POOL_INSTANCE_NAME_LABEL_KEY = "cstorpoolinstance.openebs.io/name"
PERSISTENT_VOLUME_LABEL_KEY = "openebs.io/persistent-volume"
HOSTNAME_LABEL_KEY = "kubernetes.io/hostname"

Columns = Sequence[ColumnDefinition]
Rows = list[list[Any]]
Lister = Callable[[Any, Sequence[str] | None], tuple[Columns, Rows]]
Describer = Callable[[Any, str], None]

_CSTOR_POOL_TEMPLATE = """
{{.name}} Details :
----------------
NAME             : {{.name}}
HOSTNAME         : {{.host_name}}
SIZE             : {{.size}}
FREE CAPACITY    : {{.free_capacity}}
READ ONLY STATUS : {{.read_only_status}}
STATUS\t         : {{.status}}
RAID TYPE        : {{.raid_type}}
"""

_LVM_DESC_TEMPLATE = """
{{.host_name}} Details :

HOSTNAME        : {{.host_name}}
NAMESPACE       : {{.namespace}}
NUMBER OF POOLS : {{.number_of_pools}}
TOTAL CAPACITY  : {{.size}}
TOTAL FREE      : {{.total_free}}
TOTAL LVs       : {{.total_logical_volumes}}
TOTAL PVs       : {{.total_pvs}}

"""

_ZFS_DESC_TEMPLATE = """
{{.host_name}} Details :

HOSTNAME        : {{.host_name}}
NAMESPACE       : {{.namespace}}
NUMBER OF POOLS : {{.number_of_pools}}
TOTAL FREE      : {{.total_free}}
"""

_LVM_VG_DETAIL_COLUMNS = (
    ColumnDefinition("Name"),
    ColumnDefinition("UUID"),
    ColumnDefinition("LV count"),
    ColumnDefinition("PV count"),
    ColumnDefinition("Used percentage"),
)


@dataclass
class LVMvgDesc:
    """Summary of an LVM node and the volume groups on it."""

    host_name: str = ""
    namespace: str = ""
    number_of_pools: int = 0
    size: str = ""
    total_free: str = ""
    total_logical_volumes: int = 0
    total_pvs: int = 0


@dataclass
class ZfsNodeDesc:
    """Summary of a ZFS node and the pools on it."""

    host_name: str = ""
    namespace: str = ""
    number_of_pools: int = 0
    total_free: str = ""


def _get(obj: Any, *path: str, default: Any = None) -> Any:
    for part in path:
        if not isinstance(obj, Mapping):
            return default
        obj = obj.get(part)
    return default if obj is None else obj


def _items(doc: Any) -> list[Mapping]:
    return list(_get(doc, "items", default=()))


def _to_quantity(value: Any) -> Quantity:
    if isinstance(value, Quantity):
        return value
    if value is None or value == "":
        return Quantity()
    return Quantity.parse(str(value))


def _quantity_str(value: Any) -> str:
    try:
        return str(_to_quantity(value))
    except ValueError:
        return str(value)


def _age(obj: Mapping) -> str:
    stamp = _get(obj, "metadata", "creationTimestamp")
    if stamp is None:
        return ""
    if isinstance(stamp, str):
        try:
            stamp = datetime.fromisoformat(stamp.replace("Z", "+00:00"))
        except ValueError:
            return ""
    if stamp.tzinfo is None:
        stamp = stamp.replace(tzinfo=timezone.utc)
    return duration(datetime.now(timezone.utc) - stamp)


def _tree_prefix(index: int, count: int) -> str:
    return FIRST_ELEM_PREFIX if index < count - 1 else LAST_ELEM_PREFIX


def get_cstor_pools(client: Any, pools: Sequence[str] | None) -> tuple[Columns, Rows]:
    """List cStor pool instances as table columns and rows."""
    try:
        cspis = client.get_cspis(pools, "")
    except Exception as exc:
        raise RuntimeError(f"error listing pools: {exc}") from exc
    items = _items(cspis)
    if not items:
        raise LookupError("no cstor pools are found")
    rows = [
        [
            _get(item, "metadata", "name", default=""),
            _get(item, "metadata", "labels", HOSTNAME_LABEL_KEY, default=""),
            convert_to_ibytes(_quantity_str(_get(item, "status", "capacity", "free"))),
            convert_to_ibytes(_quantity_str(_get(item, "status", "capacity", "total"))),
            bool(_get(item, "status", "readOnly", default=False)),
            _get(item, "status", "provisionedReplicas", default=0),
            _get(item, "status", "healthyReplicas", default=0),
            str(_get(item, "status", "phase", default="")),
            _age(item),
        ]
        for item in items
    ]
    return CSTOR_POOL_LIST_COLUMN_DEFINITIONS, rows


def _block_devices(cspi: Mapping) -> list[str]:
    groups = list(_get(cspi, "spec", "dataRaidGroups", default=()))
    groups += list(_get(cspi, "spec", "writeCacheRaidGroups", default=()))
    return [
        _get(device, "blockDeviceName", default="")
        for group in groups
        for device in _get(group, "blockDevices", default=())
    ]


def describe_cstor_pool(client: Any, pool_name: str) -> None:
    """Print a cStor pool instance with its block devices and replicas."""
    try:
        pools = client.get_cspis([pool_name], "")
    except Exception as exc:
        raise RuntimeError(f"error getting pool info: {exc}") from exc
    items = _items(pools)
    if not items:
        raise LookupError(f"cstor-pool {pool_name} not found")
    pool = items[0]
    details = PoolInfo(
        name=_get(pool, "metadata", "name", default=""),
        host_name=_get(pool, "spec", "hostName", default=""),
        size=convert_to_ibytes(_quantity_str(_get(pool, "status", "capacity", "total"))),
        free_capacity=convert_to_ibytes(_quantity_str(_get(pool, "status", "capacity", "free"))),
        read_only_status=bool(_get(pool, "status", "readOnly", default=False)),
        status=str(_get(pool, "status", "phase", default="")),
        raid_type=_get(pool, "spec", "poolConfig", "dataRaidGroupType", default=""),
    )
    print_by_template("pool", _CSTOR_POOL_TEMPLATE, details)

    bd_rows: Rows = []
    for bd_name in _block_devices(pool):
        try:
            bd = client.get_bd(bd_name)
        except Exception:
            print(f"Could not find the blockdevice : {bd_name}")
            continue
        bd_rows.append(
            [
                _get(bd, "metadata", "name", default=""),
                bytes_size(float(_get(bd, "spec", "capacity", "storage", default=0))),
                _get(bd, "status", "state", default=""),
            ]
        )
    if bd_rows:
        print("\nBlockdevice details :\n---------------------")
        table_printer(BD_LIST_COLUMN_DEFINITIONS, bd_rows, wide=True)
    else:
        print("Could not find any blockdevice that belongs to the pool")

    cvr_rows: Rows = []
    try:
        cvrs = client.get_cvrs(f"{CSTOR_POOL_INSTANCE_NAME_LABEL_KEY}={pool_name}")
    except Exception:
        print("None of the replicas are running", end="")
    else:
        for cvr in _items(cvrs):
            pvc_name = ""
            try:
                pv = client.get_pv(_get(cvr, "metadata", "labels", PERSISTENT_VOLUME_LABEL_KEY, default=""))
            except Exception:
                pass
            else:
                pvc_name = _get(pv, "spec", "claimRef", "name", default="")
            cvr_rows.append(
                [
                    _get(cvr, "metadata", "name", default=""),
                    pvc_name,
                    convert_to_ibytes(_get(cvr, "status", "capacity", "total", default="")),
                    _get(cvr, "status", "phase", default=""),
                ]
            )
    if cvr_rows:
        print("\nReplica Details :\n-----------------")
        table_printer(POOL_REPLICA_COLUMN_DEFINITIONS, cvr_rows, wide=True)


def get_volume_groups(client: Any, vgs: Sequence[str] | None) -> tuple[Columns, Rows]:
    """List LVM volume groups grouped by node, drawn as a tree."""
    nodes = _items(client.get_lvm_nodes(vgs))
    rows: Rows = []
    for node in nodes:
        rows.append([_get(node, "metadata", "name", default=""), "", "", ""])
        groups = list(_get(node, "volumeGroups", default=()))
        for index, vg in enumerate(groups):
            rows.append(
                [
                    _tree_prefix(index, len(groups)) + _get(vg, "name", default=""),
                    convert_to_ibytes(_quantity_str(vg.get("free"))),
                    convert_to_ibytes(_quantity_str(vg.get("size"))),
                ]
            )
        rows.append(["", "", ""])
    if not rows:
        raise LookupError("no lvm volumegroups found")
    return LVM_VOLGROUP_LIST_COLUMN_DEFINITIONS, rows


def describe_lvm_vg(client: Any, vg: str) -> None:
    """Print an LVM node and the volume groups present on it."""
    items = _items(client.get_lvm_nodes([vg]))
    if not items:
        raise LookupError(f"vg group {vg} not found")
    node = items[0]
    groups = list(_get(node, "volumeGroups", default=()))
    total_free, total = Quantity(), Quantity()
    total_lv = total_pv = 0
    for group in groups:
        total_free.add(_to_quantity(group.get("free")))
        total.add(_to_quantity(group.get("size")))
        total_lv += group.get("lvCount", 0)
        total_pv += group.get("pvCount", 0)
    desc = LVMvgDesc(
        host_name=_get(node, "metadata", "name", default=""),
        namespace=_get(node, "metadata", "namespace", default=""),
        number_of_pools=len(groups),
        size=convert_to_ibytes(str(total)),
        total_free=convert_to_ibytes(str(total_free)),
        total_logical_volumes=total_lv,
        total_pvs=total_pv,
    )
    rows: Rows = []
    for group in groups:
        free_percent = get_used_percentage(_quantity_str(group.get("size")), _quantity_str(group.get("free")))
        rows.append(
            [
                group.get("name", ""),
                group.get("uuid", ""),
                group.get("lvCount", 0),
                group.get("pvCount", 0),
                f"{100 - free_percent:.1f}%",
            ]
        )
    try:
        print_by_template("lvmvgs", _LVM_DESC_TEMPLATE, desc)
    except ValueError:
        pass
    print("Volume group details")
    print("---------------------")
    table_printer(_LVM_VG_DETAIL_COLUMNS, rows, wide=True)


def get_zfs_pools(client: Any, zfs_nodes: Sequence[str] | None) -> tuple[Columns, Rows]:
    """List ZFS pools grouped by node, drawn as a tree."""
    nodes = _items(client.get_zfs_nodes(zfs_nodes))
    rows: Rows = []
    for node in nodes:
        rows.append([_get(node, "metadata", "name", default=""), ""])
        pools = list(_get(node, "pools", default=()))
        for index, pool in enumerate(pools):
            rows.append(
                [
                    _tree_prefix(index, len(pools)) + pool.get("name", ""),
                    convert_to_ibytes(_quantity_str(pool.get("free"))),
                ]
            )
        rows.append(["", ""])
    if not rows:
        raise LookupError("no zfspools found")
    return ZFS_POOL_LIST_COLUMN_DEFINITIONS, rows


def describe_zfs_node(client: Any, name: str) -> None:
    """Print a ZFS node and the free space of its pools."""
    items = _items(client.get_zfs_nodes([name]))
    if not items:
        raise LookupError(f"zfsnode {name} not found")
    node = items[0]
    pools = list(_get(node, "pools", default=()))
    total_free = Quantity()
    for pool in pools:
        total_free.add(_to_quantity(pool.get("free")))
    desc = ZfsNodeDesc(
        host_name=_get(node, "metadata", "name", default=""),
        namespace=_get(node, "metadata", "namespace", default=""),
        number_of_pools=len(pools),
        total_free=convert_to_ibytes(str(total_free)),
    )
    print_by_template("zfsnodes", _ZFS_DESC_TEMPLATE, desc)


def cas_list() -> list[Lister]:
    """Storage listing functions of every cas-type, in display order."""
    return [get_cstor_pools, get_volume_groups, get_zfs_pools]


def cas_list_map() -> dict[str, Lister]:
    """Storage listing functions keyed by cas-type."""
    return {
        CSTOR_CAS_TYPE: get_cstor_pools,
        LVM_CAS_TYPE: get_volume_groups,
        ZFS_CAS_TYPE: get_zfs_pools,
    }


def cas_describe_map() -> dict[str, Describer]:
    """Storage describing functions keyed by cas-type."""
    return {
        CSTOR_CAS_TYPE: describe_cstor_pool,
        ZFS_CAS_TYPE: describe_zfs_node,
        LVM_CAS_TYPE: describe_lvm_vg,
    }


def cas_describe_list() -> list[Describer]:
    """Storage describing functions of every cas-type."""
    return [describe_cstor_pool, describe_zfs_node, describe_lvm_vg]


def get(client: Any, pools: Sequence[str] | None, openebs_ns: str, cas_type: str) -> None:
    """Print storage of one cas-type, or of every cas-type that has any."""
    listers = cas_list_map()
    if cas_type in listers:
        header, rows = listers[cas_type](client, pools)
        table_printer(header, rows, wide=True)
    elif cas_type:
        raise ValueError(f"cas-type {cas_type} is not supported")
    else:
        for lister in cas_list():
            try:
                header, rows = lister(client, pools)
            except Exception:
                continue
            table_printer(header, rows, wide=True)
            print()


def describe(client: Any, storages: Iterable[str], openebs_ns: str, cas_type: str) -> None:
    """Describe each named storage with the cas-type's describer, or with all of them."""
    if openebs_ns:
        client.ns = openebs_ns
    try:
        ns_map = client.get_openebs_namespace_map() or {}
    except Exception:
        ns_map = {}
    if not openebs_ns:
        if cas_type == ZFS_CAS_TYPE:
            try:
                zfs = client.get_zfs_nodes(None)
            except Exception as exc:
                raise ValueError("please specify --openebs-namespace for ZFS LocalPV") from exc
            items = _items(zfs)
            if items:
                client.ns = _get(items[0], "metadata", "namespace", default="")
        elif cas_type in ns_map:
            client.ns = ns_map[cas_type]
    if cas_type:
        describers = cas_describe_map()
        if cas_type not in describers:
            raise ValueError(f"cas-type {cas_type} unknown")
        work = describers[cas_type]
        for storage in storages:
            try:
                work(client, storage)
            except Exception:
                pass
        return
    for storage in storages:
        for work in cas_describe_list():
            try:
                work(client, storage)
            except Exception:
                pass