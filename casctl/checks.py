"""Inspection helpers over Kubernetes resource documents."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Iterable

from casctl.constants import (
    HEALTHY,
    NOT_ATTACHED,
    OPENEBS_CAS_TYPE_KEY,
    OPENEBS_CAS_TYPE_KEY_SC,
    PROVISIONER_AND_CAS_TYPE_MAP,
    UNKNOWN,
)
from casctl.types import Volume


def _get(obj: Mapping | None, *path: str) -> Any:
    for part in path:
        if not isinstance(obj, Mapping):
            return None
        obj = obj.get(part)
    return obj


def check_version(version_detail: Mapping) -> str:
    """Current version when reconciled, otherwise the state and desired version."""
    state = _get(version_detail, "status", "state") or ""
    if state in ("Reconciled", ""):
        return _get(version_detail, "status", "current") or ""
    return f"{state}, desired version {version_detail.get('desired', '')}"


def check_for_vol(name: str, vols: Mapping[str, Volume]) -> Volume:
    """Return the named volume, or a placeholder showing it as not attached."""
    if name in vols:
        return vols[name]
    return Volume(
        storage_class=NOT_ATTACHED,
        node=NOT_ATTACHED,
        attachment_status=NOT_ATTACHED,
        access_mode=NOT_ATTACHED,
    )


def access_mode_to_string(access_modes: Iterable[str]) -> str:
    """Flatten access modes into one space-separated string."""
    return "".join(f"{mode} " for mode in access_modes)


def get_used_capacity_from_cvr(cvr_list: Mapping) -> str:
    """Used capacity of the first healthy replica, or an empty string."""
    for item in cvr_list.get("items") or ():
        if _get(item, "status", "phase") == HEALTHY:
            return _get(item, "status", "capacity", "used") or ""
    return ""


def get_cas_type_from_pv(pv: Mapping | None) -> str:
    """Cas-type from a PV's labels, annotations, CSI attributes or CSI driver."""
    if pv is None:
        return UNKNOWN
    for source in (_get(pv, "metadata", "labels"), _get(pv, "metadata", "annotations"),
                   _get(pv, "spec", "csi", "volumeAttributes")):
        if source and OPENEBS_CAS_TYPE_KEY in source:
            return source[OPENEBS_CAS_TYPE_KEY]
    csi = _get(pv, "spec", "csi")
    if csi is not None:
        driver = csi.get("driver", "")
        if driver in PROVISIONER_AND_CAS_TYPE_MAP:
            return PROVISIONER_AND_CAS_TYPE_MAP[driver]
    return UNKNOWN


def get_cas_type_from_sc(sc: Mapping | None) -> str:
    """Cas-type from a StorageClass's parameters or provisioner."""
    if sc is None:
        return UNKNOWN
    params = sc.get("parameters")
    if params and OPENEBS_CAS_TYPE_KEY_SC in params:
        return params[OPENEBS_CAS_TYPE_KEY_SC]
    return PROVISIONER_AND_CAS_TYPE_MAP.get(sc.get("provisioner", ""), UNKNOWN)


def get_cas_type(pv: Mapping | None, sc: Mapping | None) -> str:
    """Cas-type from the PV, falling back to the StorageClass."""
    value = get_cas_type_from_pv(pv)
    if value != UNKNOWN:
        return value
    return get_cas_type_from_sc(sc)


def get_ready_containers(containers: Iterable[Mapping]) -> str:
    """Ready versus total containers, such as ``2/3``."""
    containers = list(containers)
    ready = sum(1 for c in containers if c.get("ready"))
    return f"{ready}/{len(containers)}"