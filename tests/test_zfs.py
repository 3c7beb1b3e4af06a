import pytest

from casctl.constants import JIVA_CSI_DRIVER, ZFS_CSI_DRIVER
from casctl.volume.zfs import describe_zfs_localpvs, get_zfs_localpvs


class FakeClient:
    def __init__(self, ns="", zfs_vols=(), sts=(), fail=False):
        self.ns = ns
        self.zfs_vols = list(zfs_vols)
        self.sts = list(sts)
        self.fail = fail

    def get_zfs_vols(self, names):
        if self.fail:
            raise RuntimeError("failed to list ZFSVolumes")
        items = [v for v in self.zfs_vols if names is None or v["metadata"]["name"] in names]
        return {"items": items}

    def get_csi_controller_sts(self, label):
        for s in self.sts:
            if s["metadata"]["labels"].get("openebs.io/component-name") == label:
                return s
        raise LookupError("no controller")


ZFS_VOL1 = {
    "metadata": {"name": "pvc-1", "namespace": "zfslocalpv", "labels": {"kubernetes.io/nodename": "node1"}},
    "spec": {
        "ownerNodeID": "node1",
        "poolName": "zfspv",
        "capacity": "4Gi",
        "recordsize": "4k",
        "compression": "off",
        "dedup": "off",
        "thinProvision": "No",
        "volumeType": "DATASET",
        "fsType": "zfs",
        "shared": "NotShared",
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


ZFS_PV1 = _pv("pvc-1", ZFS_CSI_DRIVER, "zfs-sc-1", "zfs-pvc-1")
JIVA_PV1 = _pv("pvc-1", JIVA_CSI_DRIVER, "pvc-1-sc", "mongo-jiva")
PV2 = {"metadata": {"name": "pvc-1"}, "spec": {"capacity": {"storage": ""}}, "status": {}}
PV3 = {"metadata": {"name": "pvc-1"}, "spec": {}, "status": {}}
CSI_CTRL_STS = {
    "metadata": {
        "name": "fake-ZFS-CSI",
        "namespace": "zfslocalpv",
        "labels": {"openebs.io/version": "1.9.0", "openebs.io/component-name": "openebs-zfs-controller"},
    }
}


def test_get_no_zfs_volumes_present():
    client = FakeClient(ns="random-namespace", fail=True)
    with pytest.raises(RuntimeError, match="failed to list ZFSVolumes"):
        get_zfs_localpvs(client, {"items": [JIVA_PV1, PV2, PV3]}, "zfslocalpv")


def test_get_only_one_zfs_volume_present():
    client = FakeClient(ns="zfslocalpv", zfs_vols=[ZFS_VOL1], sts=[CSI_CTRL_STS])
    rows = get_zfs_localpvs(client, {"items": [JIVA_PV1, ZFS_PV1]}, "zfslocalpv")
    assert rows == [
        ["zfslocalpv", "pvc-1", "Ready", "1.9.0", "4.0GiB", "zfs-sc-1", "Bound", "ReadWriteOnce", "node1"]
    ]


def test_get_zfs_vol_absent():
    client = FakeClient(ns="zfslocalpv", sts=[CSI_CTRL_STS])
    assert get_zfs_localpvs(client, {"items": [ZFS_PV1]}, "zfslocalpv") == []


def test_get_namespace_conflicts():
    client = FakeClient(ns="jiva", zfs_vols=[ZFS_VOL1], sts=[CSI_CTRL_STS])
    assert get_zfs_localpvs(client, {"items": [JIVA_PV1, ZFS_PV1]}, "zfslocalpvXYZ") == []


def test_get_controller_sts_not_present():
    client = FakeClient(ns="jiva", zfs_vols=[ZFS_VOL1])
    rows = get_zfs_localpvs(client, {"items": [JIVA_PV1, ZFS_PV1]}, "zfslocalpv")
    assert rows == [
        ["zfslocalpv", "pvc-1", "Ready", "N/A", "4.0GiB", "zfs-sc-1", "Bound", "ReadWriteOnce", "node1"]
    ]


def test_describe_nil_volume():
    client = FakeClient(ns="zfs", fail=True)
    with pytest.raises(ValueError, match="ZFS volume nil"):
        describe_zfs_localpvs(client, None)


def test_describe_controller_absent(capsys):
    client = FakeClient(ns="zfslocalpv", zfs_vols=[ZFS_VOL1])
    describe_zfs_localpvs(client, ZFS_PV1)
    out = capsys.readouterr().out
    assert "Version       : N/A" in out
    assert "PoolName      : zfspv" in out
    assert "Capacity      : 4Gi" in out


def test_describe_controller_present(capsys):
    client = FakeClient(ns="zfslocalpv", zfs_vols=[ZFS_VOL1], sts=[CSI_CTRL_STS])
    describe_zfs_localpvs(client, ZFS_PV1)
    out = capsys.readouterr().out
    assert "Version       : 1.9.0" in out
    assert "VolumeType    : DATASET" in out
    assert "Recordsize    : 4k" in out


def test_describe_listing_fails():
    client = FakeClient(ns="zfslocalpv", zfs_vols=[ZFS_VOL1], fail=True)
    with pytest.raises(RuntimeError):
        describe_zfs_localpvs(client, ZFS_PV1)


def test_describe_other_volume_listing_fails():
    client = FakeClient(ns="zfs", zfs_vols=[ZFS_VOL1], fail=True)
    other = _pv("pvc-2", "cstor.csi.openebs.io", "cstor-sc", "cstor-pvc-2")
    with pytest.raises(RuntimeError):
        describe_zfs_localpvs(client, other)


def test_describe_missing_volume():
    client = FakeClient(ns="zfs", zfs_vols=[ZFS_VOL1])
    other = _pv("pvc-9", ZFS_CSI_DRIVER, "zfs-sc-1", "x")
    with pytest.raises(LookupError, match="pvc-9"):
        describe_zfs_localpvs(client, other)