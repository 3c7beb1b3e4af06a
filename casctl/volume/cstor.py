"""Listing and describing cStor volumes."""

from __future__ import annotations

import sys
from collections.abc import Mapping
from datetime import datetime, timezone
from typing import Any, Callable

from casctl.checks import access_mode_to_string, check_version
from casctl.constants import (
    CSTOR_BACKUP_COLUMN_DEFINITIONS,
    CSTOR_COMPLETED_BACKUP_COLUMN_DEFINITIONS,
    CSTOR_CSI_DRIVER,
    CSTOR_REPLICA_COLUMN_DEFINITIONS,
    CSTOR_RESTORE_COLUMN_DEFINITIONS,
    CVA_VOLNAME_KEY,
    NOT_ATTACHED,
)
from casctl.types import PortalInfo, VolumeInfo
from casctl.units import Quantity
from casctl.util import convert_to_ibytes, duration, print_by_template, table_printer

PERSISTENT_VOLUME_LABEL_KEY = "openebs.io/persistent-volume"
CSTOR_POOL_CLUSTER_LABEL_KEY = "openebs.io/cstor-pool-cluster"

_VOLUME_INFO_TEMPLATE = """
{{.name}} Details :
-----------------
NAME            : {{.name}}
ACCESS MODE     : {{.access_mode}}
CSI DRIVER      : {{.csi_driver}}
STORAGE CLASS   : {{.storage_class}}
VOLUME PHASE    : {{.volume_phase }}
VERSION         : {{.version}}
CSPC            : {{.cspc}}
SIZE            : {{.size}}
STATUS          : {{.status}}
REPLICA COUNT\t: {{.replica_count}}
"""

_PORTAL_TEMPLATE = """
Portal Details :
------------------
IQN              :  {{.iqn}}
VOLUME NAME      :  {{.volume_name}}
TARGET NODE NAME :  {{.target_node_name}}
PORTAL           :  {{.portal}}
TARGET IP        :  {{.target_ip}}
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


def _fetch_map(fetch: Callable[[], Any], key: Callable[[Mapping], Any], message: str) -> dict:
    """Fetch resources and key them; a failed or empty listing is an error."""
    try:
        items = _items(fetch())
    except Exception as exc:
        raise RuntimeError(message) from exc
    if not items:
        raise RuntimeError(message)
    return {key(item): item for item in items if key(item) is not None}


def get_cstor(client: Any, pv_list: Any, openebs_ns: str) -> list[list[Any]]:
    """Table rows for the cStor volumes among ``pv_list``."""
    cv_map = _fetch_map(
        lambda: client.get_cvs(None),
        lambda item: _get(item, "metadata", "name"),
        "failed to list CStorVolumes",
    )
    cva_map = _fetch_map(
        client.get_cvas,
        lambda item: _get(item, "metadata", "labels", CVA_VOLNAME_KEY),
        "failed to list CStorVolumeAttachments",
    )
    rows: list[list[Any]] = []
    for pv in _items(pv_list):
        if _get(pv, "spec", "csi", "driver") != CSTOR_CSI_DRIVER:
            continue
        name = _get(pv, "metadata", "name", default="")
        cv = cv_map.get(name)
        if cv is None:
            sys.stderr.write(f"couldn't find cv {name}")
            cv = {}
        ns = _get(cv, "metadata", "namespace", default="")
        if openebs_ns and openebs_ns != ns:
            continue
        cva = cva_map.get(name)
        attached_node = _get(cva, "metadata", "labels", "nodeID", default="") if cva else ""
        access_modes = _get(pv, "spec", "accessModes", default=[]) or [""]
        rows.append(
            [
                ns,
                name,
                _get(cv, "status", "phase", default=""),
                _get(cv, "versionDetails", "status", "current", default=""),
                convert_to_ibytes(_quantity_str(_get(pv, "spec", "capacity", "storage"))),
                _get(pv, "spec", "storageClassName", default=""),
                _get(pv, "status", "phase", default=""),
                access_modes[0],
                attached_node,
            ]
        )
    return rows


def _optional_list(fetch: Callable[[str], Any], selector: str) -> Any:
    try:
        return fetch(selector)
    except Exception:
        return None


def describe_cstor_volume(client: Any, vol: Mapping) -> None:
    """Print a cStor volume with its portal, replicas, backups and restores."""
    name = _get(vol, "metadata", "name", default="")
    try:
        cv = client.get_cv(name)
    except Exception:
        sys.stderr.write(f"failed to get cStorVolume for {name}\n")
        raise
    try:
        cvc = client.get_cvc(name)
    except Exception:
        sys.stderr.write(f"failed to get cStor Volume config for {name}\n")
        raise
    try:
        cva = client.get_cva(f"{CVA_VOLNAME_KEY}={name}")
    except Exception:
        node_name = NOT_ATTACHED
        sys.stderr.write(f"failed to get CStorVolumeAttachments for {name}\n")
    else:
        node_name = _get(cva, "spec", "volume", "ownerNodeID", default="")

    selector = f"{PERSISTENT_VOLUME_LABEL_KEY}={name}"
    cvrs = _items(_optional_list(client.get_cvrs, selector))
    if not cvrs:
        sys.stderr.write(f"failed to get cStor Volume Replicas for {name}\n")

    capacity = _quantity_str(_get(cv, "status", "capacity"))
    replica_count = _get(cv, "spec", "replicationFactor", default=0)
    volume = VolumeInfo(
        access_mode=access_mode_to_string(_get(vol, "spec", "accessModes", default=[])),
        capacity=capacity,
        cspc=_get(cvc, "metadata", "labels", CSTOR_POOL_CLUSTER_LABEL_KEY, default=""),
        csi_driver=_get(vol, "spec", "csi", "driver", default=""),
        csi_volume_attachment_name=_get(vol, "spec", "csi", "volumeHandle", default=""),
        name=_get(cv, "metadata", "name", default=""),
        namespace=_get(cv, "metadata", "namespace", default=""),
        pvc=_get(vol, "spec", "claimRef", "name", default=""),
        replica_count=replica_count,
        volume_phase=_get(vol, "status", "phase", default=""),
        storage_class=_get(vol, "spec", "storageClassName", default=""),
        version=check_version(_get(cv, "versionDetails", default={})),
        size=convert_to_ibytes(capacity),
        status=_get(cv, "status", "phase", default=""),
    )
    print_by_template("volume", _VOLUME_INFO_TEMPLATE, volume)

    portal = PortalInfo(
        iqn=_get(cv, "spec", "iqn", default=""),
        volume_name=volume.name,
        portal=_get(cv, "spec", "targetPortal", default=""),
        target_ip=_get(cv, "spec", "targetIP", default=""),
        target_node_name=node_name,
    )
    print_by_template("PortalInfo", _PORTAL_TEMPLATE, portal)

    if replica_count == 0 or not _get(cv, "status", "replicaStatuses", default=[]):
        print("\nNone of the replicas are running")
        return

    if cvrs:
        print("\nReplica Details :\n-----------------")
        rows = [
            [
                _get(cvr, "metadata", "name", default=""),
                convert_to_ibytes(_get(cvr, "status", "capacity", "total", default="")),
                convert_to_ibytes(_get(cvr, "status", "capacity", "used", default="")),
                _get(cvr, "status", "phase", default=""),
                _age(cvr),
            ]
            for cvr in cvrs
        ]
        table_printer(CSTOR_REPLICA_COLUMN_DEFINITIONS, rows, wide=True)

    backups = _optional_list(client.get_cv_backups, selector)
    if backups is not None:
        print("\nCstor Backup Details :\n---------------------")
        rows = [
            [
                _get(item, "metadata", "name", default=""),
                _get(item, "spec", "backupName", default=""),
                _get(item, "spec", "volumeName", default=""),
                _get(item, "spec", "backupDest", default=""),
                _get(item, "spec", "snapName", default=""),
                _get(item, "status", default=""),
            ]
            for item in _items(backups)
        ]
        table_printer(CSTOR_BACKUP_COLUMN_DEFINITIONS, rows, wide=True)

    completed = _optional_list(client.get_cv_completed_backups, selector)
    if completed is not None:
        print("\nCstor Completed Backup Details :\n-------------------------------")
        rows = [
            [
                _get(item, "metadata", "name", default=""),
                _get(item, "spec", "backupName", default=""),
                _get(item, "spec", "volumeName", default=""),
                _get(item, "spec", "lastSnapName", default=""),
            ]
            for item in _items(completed)
        ]
        table_printer(CSTOR_COMPLETED_BACKUP_COLUMN_DEFINITIONS, rows, wide=True)

    restores = _optional_list(client.get_cv_restores, selector)
    if restores is not None:
        print("\nCstor Restores Details :\n-----------------------")
        rows = [
            [
                _get(item, "metadata", "name", default=""),
                _get(item, "spec", "restoreName", default=""),
                _get(item, "spec", "volumeName", default=""),
                _get(item, "spec", "restoreSrc", default=""),
                _get(item, "spec", "storageClass", default=""),
                _quantity_str(_get(item, "spec", "size")),
                _get(item, "status", default=""),
            ]
            for item in _items(restores)
        ]
        table_printer(CSTOR_RESTORE_COLUMN_DEFINITIONS, rows, wide=True)
    print()