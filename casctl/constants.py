"""Well-known names, labels, mappings and table layouts for OpenEBS storage engines."""

from __future__ import annotations

from dataclasses import dataclass
from types import MappingProxyType
from typing import Mapping


@dataclass(frozen=True)
class ColumnDefinition:
    """A table column heading and the kind of value it holds."""

    name: str
    type: str = "string"


# Label present on a PV naming its cas-type
OPENEBS_CAS_TYPE_KEY = "openebs.io/cas-type"
# Returned when the cas-type cannot be determined
UNKNOWN = "unknown"
# Parameter present on a StorageClass naming its cas-type
OPENEBS_CAS_TYPE_KEY_SC = "cas-type"

CSTOR_CAS_TYPE = "cstor"
ZFS_CAS_TYPE = "localpv-zfs"
JIVA_CAS_TYPE = "jiva"
LVM_CAS_TYPE = "localpv-lvm"
LOCAL_HOSTPATH_CAS_TYPE = "localpv-hostpath"
LOCAL_DEVICE_CAS_TYPE = "localpv-device"

HEALTHY = "Healthy"
STORAGE_KEY = "storage"
NOT_ATTACHED = "N/A"
CVA_VOLNAME_KEY = "Volname"
UNICODE_CROSS = "\u2718"
UNICODE_CHECK = "\u2714"
NOT_FOUND = "Not Found"
CVA_NOT_ATTACHED = "Not Attached to Application"
ATTACHED = "Attached"

# CSI driver names
CSTOR_CSI_DRIVER = "cstor.csi.openebs.io"
JIVA_CSI_DRIVER = "jiva.csi.openebs.io"
ZFS_CSI_DRIVER = "zfs.csi.openebs.io"
# May later also cover local-hostpath, local-device or zfs-localpv.
LOCALPV_LVM_CSI_DRIVER = "local.csi.openebs.io"

# Component-name label values of the CSI controllers
CSTOR_CSI_CONTROLLER_LABEL_VALUE = "openebs-cstor-csi-controller"
JIVA_CSI_CONTROLLER_LABEL_VALUE = "openebs-jiva-csi-controller"
LVM_LOCALPV_CSI_CONTROLLER_LABEL_VALUE = "openebs-lvm-controller"
ZFS_LOCALPV_CSI_CONTROLLER_LABEL_VALUE = "openebs-zfs-controller"

# Control-plane component names per engine
CSTOR_COMPONENT_NAMES = (
    "cspc-operator,cvc-operator,cstor-admission-webhook,"
    "openebs-cstor-csi-node,openebs-cstor-csi-controller"
)
NDM_COMPONENT_NAMES = "openebs-ndm-operator,ndm"
JIVA_COMPONENT_NAMES = (
    "openebs-jiva-csi-node,openebs-jiva-csi-controller,"
    "openebs-localpv-provisioner,jiva-operator"
)
LVM_COMPONENT_NAMES = "openebs-lvm-controller,openebs-lvm-node"
ZFS_COMPONENT_NAMES = "openebs-zfs-controller,openebs-zfs-node"
HOSTPATH_COMPONENT_NAMES = "openebs-localpv-provisioner"

CAS_TYPE_AND_COMPONENT_NAME_MAP: Mapping[str, str] = MappingProxyType(
    {
        CSTOR_CAS_TYPE: CSTOR_CSI_CONTROLLER_LABEL_VALUE,
        JIVA_CAS_TYPE: JIVA_CSI_CONTROLLER_LABEL_VALUE,
        LVM_CAS_TYPE: LVM_LOCALPV_CSI_CONTROLLER_LABEL_VALUE,
        ZFS_CAS_TYPE: ZFS_LOCALPV_CSI_CONTROLLER_LABEL_VALUE,
    }
)

COMPONENT_NAME_TO_CAS_TYPE_MAP: Mapping[str, str] = MappingProxyType(
    {
        CSTOR_CSI_CONTROLLER_LABEL_VALUE: CSTOR_CAS_TYPE,
        JIVA_CSI_CONTROLLER_LABEL_VALUE: JIVA_CAS_TYPE,
        LVM_LOCALPV_CSI_CONTROLLER_LABEL_VALUE: LVM_CAS_TYPE,
        ZFS_LOCALPV_CSI_CONTROLLER_LABEL_VALUE: ZFS_CAS_TYPE,
    }
)

PROVISIONER_AND_CAS_TYPE_MAP: Mapping[str, str] = MappingProxyType(
    {
        CSTOR_CSI_DRIVER: CSTOR_CAS_TYPE,
        JIVA_CSI_DRIVER: JIVA_CAS_TYPE,
        LOCALPV_LVM_CSI_DRIVER: LVM_CAS_TYPE,
        ZFS_CSI_DRIVER: ZFS_CAS_TYPE,
    }
)

CAS_TYPE_TO_COMPONENT_NAMES_MAP: Mapping[str, str] = MappingProxyType(
    {
        CSTOR_CAS_TYPE: CSTOR_COMPONENT_NAMES + "," + NDM_COMPONENT_NAMES,
        JIVA_CAS_TYPE: JIVA_COMPONENT_NAMES,
        LOCAL_HOSTPATH_CAS_TYPE: HOSTPATH_COMPONENT_NAMES,
        LOCAL_DEVICE_CAS_TYPE: HOSTPATH_COMPONENT_NAMES + "," + NDM_COMPONENT_NAMES,
        ZFS_CAS_TYPE: ZFS_COMPONENT_NAMES,
        LVM_CAS_TYPE: LVM_COMPONENT_NAMES,
    }
)


def _columns(*names: str) -> tuple[ColumnDefinition, ...]:
    return tuple(ColumnDefinition(name) for name in names)


CSTOR_REPLICA_COLUMN_DEFINITIONS = _columns("Name", "Total", "Used", "Status", "Age")

POD_DETAILS_COLUMN_DEFINITIONS = _columns(
    "Namespace", "Name", "Ready", "Status", "Age", "IP", "Node"
)

JIVA_POD_DETAILS_COLUMN_DEFINITIONS = _columns(
    "Namespace", "Name", "Mode", "Node", "Status", "IP", "Ready", "Age"
)

VOLUME_LIST_COLUMN_DEFINITIONS = _columns(
    "Namespace",
    "Name",
    "Status",
    "Version",
    "Capacity",
    "Storage Class",
    "Attached",
    "Access Mode",
    "Attached Node",
)

CSTOR_POOL_LIST_COLUMN_DEFINITIONS = (
    ColumnDefinition("Name"),
    ColumnDefinition("HostName"),
    ColumnDefinition("Free"),
    ColumnDefinition("Capacity"),
    ColumnDefinition("Read Only", "bool"),
    ColumnDefinition("Provisioned Replicas", "int"),
    ColumnDefinition("Healthy Replicas", "int"),
    ColumnDefinition("Status"),
    ColumnDefinition("Age"),
)

BD_LIST_COLUMN_DEFINITIONS = _columns("Name", "Capacity", "State")

POOL_REPLICA_COLUMN_DEFINITIONS = _columns("Name", "PVC Name", "Size", "State")

CSTOR_BACKUP_COLUMN_DEFINITIONS = _columns(
    "Name", "Backup Name", "Volume Name", "Backup Destination", "Snap Name", "Status"
)

CSTOR_COMPLETED_BACKUP_COLUMN_DEFINITIONS = _columns(
    "Name", "Backup Name", "Volume Name", "Last Snap Name"
)

CSTOR_RESTORE_COLUMN_DEFINITIONS = _columns(
    "Name", "Restore Name", "Volume Name", "Restore Source", "Storage Class", "Status"
)

BD_TREE_LIST_COLUMN_DEFINITIONS = _columns(
    "Name", "Path", "Size", "ClaimState", "Status", "FsType", "MountPoint"
)

LVM_VOLGROUP_LIST_COLUMN_DEFINITIONS = _columns("Name", "FreeSize", "TotalSize")

ZFS_POOL_LIST_COLUMN_DEFINITIONS = _columns("Name", "FreeSize")

JIVA_REPLICA_PVC_COLUMN_DEFINITIONS = _columns(
    "Name", "Status", "Volume", "Capacity", "Storageclass", "Age"
)

CSTOR_VOLUME_CR_STATUS_COLUMN_DEFINITIONS = _columns("Kind", "Name", "Status")

VOLUME_TOTAL_AND_USAGE_DETAIL_COLUMN_DEFINITIONS = _columns(
    "Total Capacity", "Used Capacity", "Available Capacity"
)

EVENTS_COLUMN_DEFINITIONS = _columns("Name", "Action", "Reason", "Message", "Type")

VERSION_COLUMN_DEFINITION = _columns("Component", "Version")

CLUSTER_INFO_COLUMN_DEFINITIONS = _columns(
    "Cas-Type", "Namespace", "Version", "Working", "Status"
)