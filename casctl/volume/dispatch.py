"""Choosing the right cas-type implementation to list or describe volumes."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Callable, Iterable

from casctl.checks import get_cas_type, get_cas_type_from_pv
from casctl.constants import (
    CSTOR_CAS_TYPE,
    JIVA_CAS_TYPE,
    LVM_CAS_TYPE,
    VOLUME_LIST_COLUMN_DEFINITIONS,
    ZFS_CAS_TYPE,
)
from casctl.util import table_printer
from casctl.volume.cstor import describe_cstor_volume, get_cstor
from casctl.volume.jiva import describe_jiva_volume, get_jiva
from casctl.volume.lvm import describe_lvm_localpvs, get_lvm_localpv
from casctl.volume.zfs import describe_zfs_localpvs, get_zfs_localpvs

Lister = Callable[[Any, Any, str], list]
Describer = Callable[[Any, Mapping], None]


def _items(doc: Any) -> list:
    if doc is None:
        return []
    if isinstance(doc, Mapping):
        return list(doc.get("items") or ())
    return list(doc)


def cas_list() -> list[Lister]:
    """Volume listing functions of every cas-type."""
    return [get_jiva, get_cstor, get_zfs_localpvs, get_lvm_localpv]


def cas_list_map() -> dict[str, Lister]:
    """Volume listing functions keyed by cas-type."""
    return {
        JIVA_CAS_TYPE: get_jiva,
        CSTOR_CAS_TYPE: get_cstor,
        ZFS_CAS_TYPE: get_zfs_localpvs,
        LVM_CAS_TYPE: get_lvm_localpv,
    }


def cas_describe_map() -> dict[str, Describer]:
    """Volume describing functions keyed by cas-type."""
    return {
        JIVA_CAS_TYPE: describe_jiva_volume,
        CSTOR_CAS_TYPE: describe_cstor_volume,
        ZFS_CAS_TYPE: describe_zfs_localpvs,
        LVM_CAS_TYPE: describe_lvm_localpvs,
    }


def get(client: Any, vols: Iterable[str] | None, openebs_ns: str, cas_type: str) -> list[list[Any]]:
    """Print volumes of one cas-type, or of every cas-type, and return the rows."""
    pv_list = client.get_pvs(None if vols is None else list(vols), "")
    listers = cas_list_map()
    if cas_type in listers:
        rows = listers[cas_type](client, pv_list, openebs_ns)
    else:
        rows = []
        for lister in cas_list():
            try:
                rows.extend(lister(client, pv_list, openebs_ns))
            except Exception:
                continue
    table_printer(VOLUME_LIST_COLUMN_DEFINITIONS, rows, wide=True)
    return rows


def describe(client: Any, vols: Iterable[str] | None, openebs_ns: str) -> None:
    """Describe each named volume with the describer of its cas-type."""
    if vols is None:
        raise ValueError("please provide atleast one pv name to describe")
    if openebs_ns:
        client.ns = openebs_ns
    try:
        pv_list = client.get_pvs(list(vols), "")
    except Exception as exc:
        raise LookupError("no volumes found corresponding to the names") from exc
    try:
        ns_map = client.get_openebs_namespace_map() or {}
    except Exception:
        ns_map = {}
    describers = cas_describe_map()
    for pv in _items(pv_list):
        sc_name = (pv.get("spec") or {}).get("storageClassName", "")
        try:
            sc = client.get_sc(sc_name)
        except Exception:
            cas_type = get_cas_type_from_pv(pv)
        else:
            cas_type = get_cas_type(pv, sc)
        if not openebs_ns:
            if cas_type in ns_map:
                client.ns = ns_map[cas_type]
            elif cas_type not in (ZFS_CAS_TYPE, LVM_CAS_TYPE):
                raise ValueError(
                    "could not determine the underlying storage engine ns, "
                    "please provide using '--openebs-namespace' flag"
                )
        work = describers.get(cas_type)
        if work is None:
            continue
        try:
            work(client, pv)
        except Exception:
            continue