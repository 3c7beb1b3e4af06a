import dataclasses

import pytest

from casctl import constants as c
from casctl.constants import ColumnDefinition


def test_column_definition_defaults_to_string():
    col = ColumnDefinition("Name")
    assert col.type == "string"
    assert col.name == "Name"


def test_column_definition_equality():
    assert ColumnDefinition("Free", "string") == ColumnDefinition("Free")
    assert ColumnDefinition("Read Only", "bool") != ColumnDefinition("Read Only")


def test_column_definition_is_frozen():
    col = ColumnDefinition("Name")
    with pytest.raises(dataclasses.FrozenInstanceError):
        col.name = "Other"  # type: ignore[misc]
    assert col.name == "Name"


def test_component_name_map_is_inverse_of_cas_type_map():
    inverted = {v: k for k, v in c.CAS_TYPE_AND_COMPONENT_NAME_MAP.items()}
    assert inverted == dict(c.COMPONENT_NAME_TO_CAS_TYPE_MAP)


def test_component_names_include_ndm_where_needed():
    cstor = c.CAS_TYPE_TO_COMPONENT_NAMES_MAP[c.CSTOR_CAS_TYPE].split(",")
    device = c.CAS_TYPE_TO_COMPONENT_NAMES_MAP[c.LOCAL_DEVICE_CAS_TYPE].split(",")
    assert "ndm" in cstor and "openebs-ndm-operator" in cstor
    assert device[0] == "openebs-localpv-provisioner"
    assert "ndm" in device


def test_cstor_pool_columns_types():
    cols = c.CSTOR_POOL_LIST_COLUMN_DEFINITIONS
    assert len(cols) == 9
    assert cols[4] == ColumnDefinition("Read Only", "bool")
    assert cols[5] == ColumnDefinition("Provisioned Replicas", "int")
    assert cols[6] == ColumnDefinition("Healthy Replicas", "int")


def test_tree_column_layouts():
    assert list(c.LVM_VOLGROUP_LIST_COLUMN_DEFINITIONS) == [
        ColumnDefinition("Name"),
        ColumnDefinition("FreeSize"),
        ColumnDefinition("TotalSize"),
    ]
    assert list(c.ZFS_POOL_LIST_COLUMN_DEFINITIONS) == [
        ColumnDefinition("Name"),
        ColumnDefinition("FreeSize"),
    ]


def test_volume_list_has_nine_string_columns():
    cols = c.VOLUME_LIST_COLUMN_DEFINITIONS
    assert len(cols) == 9
    assert all(col.type == "string" for col in cols)
    assert cols[-1] == ColumnDefinition("Attached Node")