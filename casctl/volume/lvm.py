"""Listing and describing LVM LocalPV volumes."""

from __future__ import annotations

import sys
from collections.abc import Mapping
from typing import Any

from casctl.checks import access_mode_to_string
from casctl.constants import LOCALPV_LVM_CSI_DRIVER, LVM_LOCALPV_CSI_CONTROLLER_LABEL_VALUE
from casctl.types import LVMVolDesc
from casctl.units import Quantity
from casctl.util import convert_to_ibytes, print_by_template

VERSION_LABEL_KEY = "openebs.io/version"
NOT_AVAILABLE = "N/A"

_LVM_VOL_INFO_TEMPLATE = """
{{.name}} Details :
------------------
Name            : {{.name}}
Namespace       : {{.namespace}}
AccessMode      : {{.access_mode}}
CSIDriver       : {{.csi_driver}}
Capacity        : {{.capacity}}
PVC             : {{.pvc}}
VolumePhase     : {{.volume_phase}}
StorageClass    : {{.storage_class}}
Version         : {{.version}}
Status          : {{.status}}
VolumeGroup     : {{.volume_group}}
Shared          : {{.shared}}
ThinProvisioned : {{.thin_provisioned}}
NodeID          : {{.node_id}}   
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
        sts = client.get_csi_controller_sts(LVM_LOCALPV_CSI_CONTROLLER_LABEL_VALUE)
    except Exception:
        return NOT_AVAILABLE
    return _get(sts, "metadata", "labels", VERSION_LABEL_KEY, default="") or NOT_AVAILABLE


def get_lvm_localpv(client: Any, pv_list: Any, openebs_ns: str) -> list[list[Any]]:
    """Table rows for the LVM LocalPV volumes among ``pv_list``."""
    pvs = _items(pv_list)
    if not pvs:
        return []
    version = _controller_version(client)
    try:
        vols = _items(client.get_lvm_vols(None))
    except Exception as exc:
        raise RuntimeError("failed to list LVMVolumes") from exc
    vol_map = {_get(vol, "metadata", "name"): vol for vol in vols}
    rows: list[list[Any]] = []
    for pv in pvs:
        if _get(pv, "spec", "csi", "driver") != LOCALPV_LVM_CSI_DRIVER:
            continue
        name = _get(pv, "metadata", "name", default="")
        lvm_vol = vol_map.get(name)
        if lvm_vol is None:
            sys.stderr.write(f"couldn't find LVM volume {name}")
            lvm_vol = {}
        ns = _get(lvm_vol, "metadata", "namespace", default="")
        if openebs_ns and openebs_ns != ns:
            continue
        access_modes = _get(pv, "spec", "accessModes", default=[]) or [""]
        rows.append(
            [
                ns,
                name,
                _get(lvm_vol, "status", "state", default=""),
                version,
                convert_to_ibytes(_quantity_str(_get(pv, "spec", "capacity", "storage"))),
                _get(pv, "spec", "storageClassName", default=""),
                _get(pv, "status", "phase", default=""),
                access_modes[0],
                _get(lvm_vol, "spec", "ownerNodeID", default=""),
            ]
        )
    return rows


def describe_lvm_localpvs(client: Any, vol: Mapping | None) -> None:
    """Print the details of one LVM LocalPV volume; nothing when it is not found."""
    if vol is None:
        raise ValueError("LVM volume nil")
    name = _get(vol, "metadata", "name", default="")
    items = _items(client.get_lvm_vols([name]))
    if not items:
        return
    lvm_vol = items[0]
    desc = LVMVolDesc(
        access_mode=access_mode_to_string(_get(vol, "spec", "accessModes", default=[])),
        capacity=_quantity_str(_get(vol, "spec", "capacity", "storage")),
        csi_driver=_get(vol, "spec", "csi", "driver", default=""),
        name=name,
        namespace=_get(lvm_vol, "metadata", "namespace", default=""),
        pvc=_get(vol, "spec", "claimRef", "name", default=""),
        volume_phase=_get(vol, "status", "phase", default=""),
        storage_class=_get(vol, "spec", "storageClassName", default=""),
        version=_controller_version(client),
        status=_get(lvm_vol, "status", "state", default=""),
        volume_group=_get(lvm_vol, "spec", "volGroup", default=""),
        shared=_get(lvm_vol, "spec", "shared", default=""),
        thin_provisioned=_get(lvm_vol, "spec", "thinProvision", default=""),
        node_id=_get(lvm_vol, "spec", "ownerNodeID", default=""),
    )
    print_by_template("volume", _LVM_VOL_INFO_TEMPLATE, desc)