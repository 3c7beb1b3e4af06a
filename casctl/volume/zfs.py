"""Listing and describing ZFS LocalPV volumes."""

from __future__ import annotations

import sys
from collections.abc import Mapping
from typing import Any

from casctl.checks import access_mode_to_string
from casctl.constants import ZFS_CSI_DRIVER, ZFS_LOCALPV_CSI_CONTROLLER_LABEL_VALUE
from casctl.types import ZFSVolDesc
from casctl.units import Quantity
from casctl.util import convert_to_ibytes, print_by_template

VERSION_LABEL_KEY = "openebs.io/version"
NODENAME_LABEL_KEY = "kubernetes.io/nodename"
NOT_AVAILABLE = "N/A"

_ZFS_VOL_INFO_TEMPLATE = """
{{.name}} Details :
-----------------
Name          : {{.name}}
Namespace     : {{.namespace}}
AccessMode    : {{.access_mode}}
CSIDriver     : {{.csi_driver}}
Capacity      : {{.capacity}}
PVC           : {{.pvc}}
VolumePhase   : {{.volume_phase}}
StorageClass  : {{.storage_class}}
Version       : {{.version}}
Status        : {{.status}}
VolumeType    : {{.volume_type}}
PoolName      : {{.pool_name}}
FileSystem    : {{.file_system}}
Compression   : {{.compression}}
Deduplication : {{.dedup}}
NodeID        : {{.node_id}}
Recordsize    : {{.recordsize}}
"""


def _get(obj: Any, *path: str, default: Any = None) -> Any:
    for part in path:
        if not isinstance(obj, Mapping):
            return default
        obj = obj.get(part)
    return default if obj is None else obj


def _items(doc: Any) -> list:
    if doc is None:
        return []
    if isinstance(doc, Mapping):
        return list(doc.get("items") or ())
    return list(doc)


def _quantity_str(value: Any) -> str:
    if value is None or value == "":
        return "0"
    try:
        return str(value if isinstance(value, Quantity) else Quantity.parse(str(value)))
    except ValueError:
        return str(value)


def _controller_version(client: Any) -> str:
    try:
        sts = client.get_csi_controller_sts(ZFS_LOCALPV_CSI_CONTROLLER_LABEL_VALUE)
    except Exception:
        return NOT_AVAILABLE
    return _get(sts, "metadata", "labels", VERSION_LABEL_KEY, default="") or NOT_AVAILABLE


def get_zfs_localpvs(client: Any, pv_list: Any, openebs_ns: str) -> list[list[Any]]:
    """Table rows for the ZFS LocalPV volumes among ``pv_list``."""
    try:
        zvols = _items(client.get_zfs_vols(None))
    except Exception as exc:
        raise RuntimeError("failed to list ZFSVolumes") from exc
    zvol_map = {_get(zvol, "metadata", "name"): zvol for zvol in zvols}
    version = _controller_version(client)
    rows: list[list[Any]] = []
    for pv in _items(pv_list):
        if _get(pv, "spec", "csi", "driver") != ZFS_CSI_DRIVER:
            continue
        name = _get(pv, "metadata", "name", default="")
        zvol = zvol_map.get(name)
        if zvol is None:
            sys.stderr.write(f"couldn't find zfs localpv volume {name}\n")
            zvol = {}
        ns = _get(zvol, "metadata", "namespace", default="")
        if openebs_ns and openebs_ns != ns:
            continue
        access_modes = _get(pv, "spec", "accessModes", default=[]) or [""]
        rows.append(
            [
                ns,
                name,
                _get(zvol, "status", "state", default=""),
                version,
                convert_to_ibytes(_quantity_str(_get(pv, "spec", "capacity", "storage"))),
                _get(pv, "spec", "storageClassName", default=""),
                _get(pv, "status", "phase", default=""),
                access_modes[0],
                _get(zvol, "metadata", "labels", NODENAME_LABEL_KEY, default=""),
            ]
        )
    return rows


def describe_zfs_localpvs(client: Any, vol: Mapping | None) -> None:
    """Print the details of one ZFS LocalPV volume."""
    if vol is None:
        raise ValueError("ZFS volume nil")
    name = _get(vol, "metadata", "name", default="")
    items = _items(client.get_zfs_vols([name]))
    if not items:
        raise LookupError(f"zfs volume {name} not found")
    zvol = items[0]
    desc = ZFSVolDesc(
        access_mode=access_mode_to_string(_get(vol, "spec", "accessModes", default=[])),
        capacity=_quantity_str(_get(vol, "spec", "capacity", "storage")),
        csi_driver=_get(vol, "spec", "csi", "driver", default=""),
        name=name,
        namespace=_get(zvol, "metadata", "namespace", default=""),
        pvc=_get(vol, "spec", "claimRef", "name", default=""),
        volume_phase=_get(vol, "status", "phase", default=""),
        storage_class=_get(vol, "spec", "storageClassName", default=""),
        version=_controller_version(client),
        status=_get(zvol, "status", "state", default=""),
        volume_type=_get(zvol, "spec", "volumeType", default=""),
        pool_name=_get(zvol, "spec", "poolName", default=""),
        file_system=_get(zvol, "spec", "fsType", default=""),
        compression=_get(zvol, "spec", "compression", default=""),
        dedup=_get(zvol, "spec", "dedup", default=""),
        node_id=_get(zvol, "spec", "ownerNodeID", default=""),
        recordsize=_get(zvol, "spec", "recordsize", default=""),
    )
    print_by_template("volume", _ZFS_VOL_INFO_TEMPLATE, desc)