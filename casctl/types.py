"""Records used to collect and display details of OpenEBS storage resources."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any

_record = dataclass(kw_only=True)


@_record
class _Named:
    name: str = ""
    namespace: str = ""


@_record
class _VolumeDetails(_Named):
    access_mode: str = ""
    csi_driver: str = ""
    capacity: str = ""
    pvc: str = ""
    volume_phase: str = ""
    storage_class: str = ""
    version: str = ""
    status: str = ""


@_record
class _ClaimDetails(_Named):
    cas_type: str = ""
    bound_volume: str = ""
    storage_class_name: str = ""
    size: str = ""
    pv_status: str = ""


@_record
class Volume(_Named):
    """A volume row as shown by the volume listing."""

    access_mode: str = ""
    attachment_status: str = ""
    capacity: str = ""
    cspc: str = ""
    csi_volume_attachment_name: str = ""
    node: str = ""
    pvc: str = ""
    status: str = ""
    storage_class: str = ""
    vol_type: str = ""
    version: str = ""


@_record
class VolumeInfo(_VolumeDetails):
    """Details shown when describing a volume."""

    cspc: str = ""
    csi_volume_attachment_name: str = ""
    replica_count: int = 0
    size: str = ""
    jvp: str = ""


@dataclass
class PortalInfo:
    """iSCSI target portal details."""

    iqn: str = ""
    volume_name: str = ""
    portal: str = ""
    target_ip: str = ""
    target_node_name: str = ""


@dataclass
class CStorReplicaInfo:
    """A cStor replica and where it lives."""

    name: str = ""
    node_name: str = ""
    id: str = ""
    status: str = ""


@_record
class PVCInfo(_ClaimDetails):
    """Details shown when describing a PVC of any other engine."""


@_record
class CstorPVCInfo(_ClaimDetails):
    """Details shown when describing a cStor PVC."""

    attached_to_node: str = ""
    pool: str = ""
    used: str = ""
    cv_status: str = ""


@_record
class JivaPVCInfo(_ClaimDetails):
    """Details shown when describing a Jiva PVC."""

    attached_to_node: str = ""
    jvp: str = ""
    jv_status: str = ""


@dataclass
class PoolInfo:
    """Details shown when describing a cStor pool instance."""

    name: str = ""
    host_name: str = ""
    size: str = ""
    free_capacity: str = ""
    read_only_status: bool = False
    status: str = ""
    raid_type: str = ""


@dataclass
class BlockDevicesInfoInPool:
    """A block device belonging to a cStor pool instance."""

    name: str = ""
    capacity: int = 0
    state: str = ""


@dataclass
class CVRInfo:
    """A volume replica provisioned on a cStor pool instance."""

    name: str = ""
    pvc_name: str = ""
    size: str = ""
    status: str = ""


class ReturnType(str, Enum):
    """Shape in which a collection of resources is returned."""

    LIST = "list"
    MAP = "map"


class Key(str, Enum):
    """What to key a resource map on."""

    NAME = "name"
    LABEL = "label"


@dataclass
class MapOptions:
    """How to build a map of resources: by name, or by the value of a label."""

    key: Key | None = None
    label_key: str = ""


@dataclass
class CstorVolumeResources:
    """Every resource needed to debug a cStor volume."""

    pv: Any = None
    pvc: Any = None
    cv: Any = None
    cvc: Any = None
    cva: Any = None
    cvrs: Any = None
    present_bds: Any = None
    expected_bds: dict[str, bool] = field(default_factory=dict)
    bdcs: Any = None
    cspis: Any = None
    cspc: Any = None


@_record
class ZFSVolDesc(_VolumeDetails):
    """Details shown when describing a ZFS LocalPV volume."""

    volume_type: str = ""
    pool_name: str = ""
    file_system: str = ""
    compression: str = ""
    dedup: str = ""
    node_id: str = ""
    recordsize: str = ""


@_record
class LVMVolDesc(_VolumeDetails):
    """Details shown when describing an LVM LocalPV volume."""

    volume_group: str = ""
    shared: str = ""
    thin_provisioned: str = ""
    node_id: str = ""


@dataclass
class ComponentData:
    """State of one control-plane component of an engine."""

    namespace: str = ""
    status: str = ""
    version: str = ""
    cas_type: str = ""