import pytest

from casctl.constants import JIVA_CSI_DRIVER, LOCALPV_LVM_CSI_DRIVER
from casctl.volume.lvm import describe_lvm_localpvs, get_lvm_localpv


class FakeClient:
    def __init__(self, ns="", lvm_vols=(), sts=(), fail=False):
        self.ns = ns
        self.lvm_vols = list(lvm_vols)
        self.sts = list(sts)
        self.fail = fail

    def get_lvm_vols(self, names):
        if self.fail:
            raise RuntimeError("failed to list LVMVolumes")
        items = [v for v in self.lvm_vols if names is None or v["metadata"]["name"] in names]
        return {"items": items}

    def get_csi_controller_sts(self, label):
        for s in self.sts:
            if s["metadata"]["labels"].get("openebs.io/component-name") == label:
                return s
        raise LookupError("no controller")


LVM_VOL1 = {
    "metadata": {"name": "pvc-1", "namespace": "lvmlocalpv", "labels": {}},
    "spec": {
        "ownerNodeID": "node1",
        "volGroup": "lvmpv",
        "vgPattern": "vg1*",
        "capacity": "4Gi",
        "shared": "NotShared",
        "thinProvision": "No",
    },
    "status": {"state": "Ready"},
}


def _pv(name, driver, sc, claim):
    return {
        "metadata": {"name": name},
        "spec": {
            "capacity": {"storage": "4Gi"},
            "csi": {"driver": driver},
            "accessModes": ["ReadWriteOnce"],
            "claimRef": {"name": claim},
            "storageClassName": sc,
        },
        "status": {"phase": "Bound"},
    }


LVM_PV1 = _pv("pvc-1", LOCALPV_LVM_CSI_DRIVER, "lvm-sc-1", "lvm-pvc-1")
JIVA_PV1 = _pv("pvc-1", JIVA_CSI_DRIVER, "pvc-1-sc", "mongo-jiva")
PV2 = {"metadata": {"name": "pvc-1"}, "spec": {"capacity": {"storage": ""}}, "status": {}}
PV3 = {"metadata": {"name": "pvc-1"}, "spec": {}, "status": {}}
CSI_CTRL_STS = {
    "metadata": {
        "name": "fake-LVM-CSI",
        "namespace": "lvm",
        "labels": {"openebs.io/version": "1.9.0", "openebs.io/component-name": "openebs-lvm-controller"},
    }
}
CAPACITY_LINE = "Capacity        : 4Gi"


def test_get_no_lvm_volumes_present():
    client = FakeClient(ns="random-namespace", fail=True)
    with pytest.raises(RuntimeError, match="failed to list LVMVolumes"):
        get_lvm_localpv(client, {"items": [JIVA_PV1, PV2, PV3]}, "openebs")


def test_get_only_one_lvm_volume_present():
    client = FakeClient(ns="lvmlocalpv", lvm_vols=[LVM_VOL1], sts=[CSI_CTRL_STS])
    rows = get_lvm_localpv(client, {"items": [JIVA_PV1, LVM_PV1]}, "lvmlocalpv")
    assert rows == [
        ["lvmlocalpv", "pvc-1", "Ready", "1.9.0", "4.0GiB", "lvm-sc-1", "Bound", "ReadWriteOnce", "node1"]
    ]


def test_get_lvm_vol_absent():
    client = FakeClient(ns="lvmlocalpv", sts=[CSI_CTRL_STS])
    assert get_lvm_localpv(client, {"items": [LVM_PV1]}, "lvmlocalpv") == []


def test_get_namespace_conflicts():
    client = FakeClient(ns="jiva", lvm_vols=[LVM_VOL1], sts=[CSI_CTRL_STS])
    assert get_lvm_localpv(client, {"items": [JIVA_PV1, LVM_PV1]}, "lvmlocalpvXYZ") == []


def test_get_controller_absent_gives_na_version():
    client = FakeClient(lvm_vols=[LVM_VOL1])
    rows = get_lvm_localpv(client, {"items": [LVM_PV1]}, "")
    assert rows[0][3] == "N/A"


def test_describe_nil_volume():
    client = FakeClient(ns="lvm", fail=True)
    with pytest.raises(ValueError, match="LVM volume nil"):
        describe_lvm_localpvs(client, None)


def test_describe_controller_absent(capsys):
    client = FakeClient(ns="lvmlocalpv", lvm_vols=[LVM_VOL1])
    describe_lvm_localpvs(client, LVM_PV1)
    out = capsys.readouterr().out
    assert "Version         : N/A" in out
    assert CAPACITY_LINE in out
    assert "VolumeGroup     : lvmpv" in out


def test_describe_controller_present(capsys):
    client = FakeClient(ns="lvmlocalpv", lvm_vols=[LVM_VOL1], sts=[CSI_CTRL_STS])
    describe_lvm_localpvs(client, LVM_PV1)
    out = capsys.readouterr().out
    assert "Version         : 1.9.0" in out
    assert "PVC             : lvm-pvc-1" in out
    assert "NodeID          : node1" in out


def test_describe_listing_fails():
    client = FakeClient(ns="lvmlocalpv", lvm_vols=[LVM_VOL1], fail=True)
    with pytest.raises(RuntimeError):
        describe_lvm_localpvs(client, LVM_PV1)


def test_describe_other_volume_listing_fails():
    client = FakeClient(ns="lvm", lvm_vols=[LVM_VOL1], fail=True)
    other = _pv("pvc-2", "cstor.csi.openebs.io", "cstor-sc", "cstor-pvc-2")
    with pytest.raises(RuntimeError):
        describe_lvm_localpvs(client, other)


def test_describe_missing_volume_prints_nothing(capsys):
    client = FakeClient(ns="lvm", lvm_vols=[LVM_VOL1])
    other = _pv("pvc-2", LOCALPV_LVM_CSI_DRIVER, "lvm-sc-1", "x")
    assert describe_lvm_localpvs(client, other) is None
    assert capsys.readouterr().out == ""