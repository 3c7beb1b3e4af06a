"""Listing and describing Jiva volumes."""

from __future__ import annotations

import sys
from collections.abc import Mapping
from datetime import datetime, timezone
from typing import Any

from casctl.checks import access_mode_to_string, get_ready_containers
from casctl.constants import (
    JIVA_CSI_DRIVER,
    JIVA_POD_DETAILS_COLUMN_DEFINITIONS,
    JIVA_REPLICA_PVC_COLUMN_DEFINITIONS,
)
from casctl.types import VolumeInfo
from casctl.units import Quantity
from casctl.util import (
    convert_to_ibytes,
    duration,
    print_by_template,
    table_printer,
    template_printer,
)

VOLUME_POLICY_ANNOTATION = "openebs.io/volume-policy"

JIVA_VOL_INFO_TEMPLATE = """
{{.name}} Details :
-----------------
NAME            : {{.name}}
ACCESS MODE     : {{.access_mode}}
CSI DRIVER      : {{.csi_driver}}
STORAGE CLASS   : {{.storage_class}}
VOLUME PHASE    : {{.volume_phase }}
VERSION         : {{.version}}
JVP             : {{.jvp}}
SIZE            : {{.size}}
STATUS          : {{.status}}
REPLICA COUNT\t: {{.replica_count}}

"""

JIVA_PORTAL_TEMPLATE = """
Portal Details :
------------------
IQN              :  {{.spec.iscsiSpec.iqn}}
VOLUME NAME      :  {{.metadata.name}}
TARGET NODE NAME :  {{.metadata.labels.nodeID}}
PORTAL           :  {{.spec.iscsiSpec.targetIP}}:{{.spec.iscsiSpec.targetPort}}

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


def get_jiva(client: Any, pv_list: Any, openebs_ns: str) -> list[list[Any]]:
    """Table rows for the Jiva volumes among ``pv_list``."""
    try:
        jvs = _items(client.get_jvs(None))
    except Exception as exc:
        raise RuntimeError("failed to list JivaVolumes") from exc
    if not jvs:
        raise RuntimeError("failed to list JivaVolumes")
    jv_map = {_get(jv, "metadata", "name"): jv for jv in jvs}
    rows: list[list[Any]] = []
    for pv in _items(pv_list):
        if _get(pv, "spec", "csi", "driver") != JIVA_CSI_DRIVER:
            continue
        name = _get(pv, "metadata", "name", default="")
        jv = jv_map.get(name)
        if jv is None:
            sys.stderr.write(f"couldn't find jv {name}\n")
            jv = {}
        ns = _get(jv, "metadata", "namespace", default="")
        if openebs_ns and openebs_ns != ns:
            continue
        access_modes = _get(pv, "spec", "accessModes", default=[]) or [""]
        rows.append(
            [
                ns,
                name,
                _get(jv, "status", "status", default=""),
                _get(jv, "versionDetails", "status", "current", default=""),
                _quantity_str(_get(pv, "spec", "capacity", "storage")),
                _get(pv, "spec", "storageClassName", default=""),
                _get(pv, "status", "phase", default=""),
                access_modes[0],
                _get(jv, "metadata", "labels", "nodeID", default=""),
            ]
        )
    return rows


def _replica_modes(jv: Mapping) -> dict[str, str]:
    """Map replica pod IPs (from addresses like ``tcp://ip:port``) to their modes."""
    modes: dict[str, str] = {}
    for status in _get(jv, "status", "replicaStatuses", default=[]):
        parts = str(status.get("address", "")).split(":")
        if len(parts) < 2:
            continue
        modes[parts[1][2:]] = status.get("mode", "")
    return modes


def _pod_row(pod: Mapping, mode: str) -> list[Any]:
    return [
        _get(pod, "metadata", "namespace", default=""),
        _get(pod, "metadata", "name", default=""),
        mode,
        _get(pod, "spec", "nodeName", default=""),
        _get(pod, "status", "phase", default=""),
        _get(pod, "status", "podIP", default=""),
        get_ready_containers(_get(pod, "status", "containerStatuses", default=[])),
        _age(pod),
    ]


def describe_jiva_volume(client: Any, vol: Mapping) -> None:
    """Print a Jiva volume with its portal, pods and replica data volumes."""
    name = _get(vol, "metadata", "name", default="")
    try:
        jv = client.get_jv(name)
    except Exception:
        sys.stderr.write(f"failed to get JivaVolume for {name}\n")
        raise
    capacity = convert_to_ibytes(_quantity_str(_get(vol, "spec", "capacity", "storage")))
    info = VolumeInfo(
        access_mode=access_mode_to_string(_get(vol, "spec", "accessModes", default=[])),
        capacity=capacity,
        csi_driver=_get(vol, "spec", "csi", "driver", default=""),
        name=_get(jv, "metadata", "name", default=""),
        namespace=_get(jv, "metadata", "namespace", default=""),
        pvc=_get(vol, "spec", "claimRef", "name", default=""),
        replica_count=_get(jv, "spec", "policy", "target", "replicationFactor", default=0),
        volume_phase=_get(vol, "status", "phase", default=""),
        storage_class=_get(vol, "spec", "storageClassName", default=""),
        version=_get(jv, "versionDetails", "status", "current", default=""),
        size=capacity,
        status=_get(jv, "status", "status", default=""),
        jvp=_get(jv, "metadata", "annotations", VOLUME_POLICY_ANNOTATION, default=""),
    )
    print_by_template("jivaVolumeInfo", JIVA_VOL_INFO_TEMPLATE, info)
    template_printer(JIVA_PORTAL_TEMPLATE, jv)

    modes = _replica_modes(jv)
    print("Controller and Replica Pod Details :")
    print("-----------------------------------")
    try:
        pods = _items(client.get_jv_target_pod(name))
    except Exception:
        print("No Controller and Replica pod exists for the JivaVolume")
    else:
        rows: list[list[Any]] = []
        for pod in pods:
            if "-ctrl-" in _get(pod, "metadata", "name", default=""):
                rows.append(_pod_row(pod, _get(jv, "status", "status", default="")))
            else:
                ip = _get(pod, "status", "podIP", default="")
                if ip in modes:
                    rows.append(_pod_row(pod, modes[ip]))
        table_printer(JIVA_POD_DETAILS_COLUMN_DEFINITIONS, rows, wide=True)

    jv_name = _get(jv, "metadata", "name", default="")
    selector = f"openebs.io/component=jiva-replica,openebs.io/persistent-volume={jv_name}"
    try:
        pvcs = _items(client.get_pvcs(client.ns, None, selector))
    except Exception:
        pvcs = []
    if not pvcs:
        sys.stdout.write(f"No replicas found for the JivaVolume {name}")
        return
    rows = [
        [
            _get(pvc, "metadata", "name", default=""),
            _get(pvc, "status", "phase", default=""),
            _get(pvc, "spec", "volumeName", default=""),
            convert_to_ibytes(_quantity_str(_get(pvc, "spec", "resources", "requests", "storage"))),
            _get(pvc, "spec", "storageClassName", default=""),
            _age(pvc),
            _get(pvc, "spec", "volumeMode", default=""),
        ]
        for pvc in pvcs
    ]
    print()
    print("Replica Data Volume Details :")
    print("-----------------------------")
    table_printer(JIVA_REPLICA_PVC_COLUMN_DEFINITIONS, rows, wide=True)