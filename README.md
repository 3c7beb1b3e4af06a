# casctl

`casctl` lists and describes container-attached storage: cStor pool
instances, LVM volume groups, ZFS pools, and the persistent volumes that
cStor, Jiva, LVM LocalPV and ZFS LocalPV provision. It builds table rows,
works out which storage engine a volume belongs to, and prints aligned tables
and detail sheets to standard output.

It has no dependencies outside the standard library.

## Installation

```
pip install .
```

To run the test suite:

```
pip install ".[test]"
pytest
```

## The client object

Every listing and describing function takes a `client` argument that you
supply. The package calls methods on it to fetch cluster resources and expects
them back as plain dictionaries in the usual Kubernetes JSON shape, with
`metadata`, `spec`, `status` and, for lists, `items`. The keys are camelCase,
as in `storageClassName` or `creationTimestamp`. A method that cannot find
what it is asked for should raise an exception.

These are the methods the package calls:

- Pools and nodes: `get_cspis(names, selector)`, `get_bd(name)`,
  `get_cvrs(selector)`, `get_pv(name)`, `get_lvm_nodes(names)`,
  `get_zfs_nodes(names)`, and `get_openebs_namespace_map()`, which maps each
  cas-type to its namespace.
- Volumes: `get_pvs(names, selector)`, `get_sc(name)`, `get_cvs(names)`,
  `get_cvas()`, `get_cv(name)`, `get_cvc(name)`, `get_cva(selector)`,
  `get_cv_backups(selector)`, `get_cv_completed_backups(selector)`,
  `get_cv_restores(selector)`, `get_jvs(names)`, `get_jv(name)`,
  `get_jv_target_pod(name)`, `get_pvcs(namespace, names, selector)`,
  `get_lvm_vols(names)`, `get_zfs_vols(names)` and
  `get_csi_controller_sts(component_label)`.
- An `ns` attribute. `describe` sets it to the namespace of the engine being
  described.

A client only needs the methods that the calls you make will reach.

## Modules

- `casctl.constants`: cas-type names such as `CSTOR_CAS_TYPE` and
  `ZFS_CAS_TYPE`, CSI driver names, control-plane component names, read-only
  lookup maps such as `PROVISIONER_AND_CAS_TYPE_MAP`, and table layouts built
  from `ColumnDefinition`.
- `casctl.types`: dataclasses that hold what gets displayed, such as `Volume`,
  `VolumeInfo`, `PortalInfo`, `PoolInfo`, `ZFSVolDesc` and `LVMVolDesc`, plus
  the `ReturnType` and `Key` enums used by `MapOptions`.
- `casctl.units`: size handling. `ram_in_bytes` parses binary sizes and
  `from_human_size` parses decimal ones. `custom_size` and `bytes_size` format
  byte counts. `Quantity` parses, adds and prints resource quantities such as
  `"4Gi"` or `"500M"`.
- `casctl.util`:
  - size helpers: `convert_to_ibytes`, `get_used_percentage` and
    `get_available_capacity`;
  - `duration`, which formats an age as at most two terms, such as `2d1m`;
  - output: `table_printer`, and `print_by_template` and `template_printer`
    for `{{.field}}` templates;
  - colours: `color_text`, `color_string_on_status` and the `Color` enum;
  - error handling: `fatal`, `check_error` and `check_err`.
- `casctl.checks`:
  - cas-type detection: `get_cas_type`, `get_cas_type_from_pv` and
    `get_cas_type_from_sc`;
  - formatting: `access_mode_to_string`, `get_ready_containers` and
    `check_version`;
  - lookups: `check_for_vol` and `get_used_capacity_from_cvr`.
- `casctl.storage`:
  - per-engine listers: `get_cstor_pools`, `get_volume_groups` and
    `get_zfs_pools`, each returning `(columns, rows)`;
  - per-engine describers: `describe_cstor_pool`, `describe_lvm_vg` and
    `describe_zfs_node`;
  - dispatchers: `get` and `describe`, which pick the functions above through
    `cas_list`, `cas_list_map`, `cas_describe_map` and `cas_describe_list`.
- `casctl.volume.cstor`, `casctl.volume.jiva`, `casctl.volume.lvm` and
  `casctl.volume.zfs`: each has a row builder (`get_cstor`, `get_jiva`,
  `get_lvm_localpv`, `get_zfs_localpvs`) and a describer
  (`describe_cstor_volume`, `describe_jiva_volume`, `describe_lvm_localpvs`,
  `describe_zfs_localpvs`).
- `casctl.volume.dispatch`:
  - `get` prints the volume table and returns its rows;
  - `describe` works out each volume's cas-type and calls the matching
    describer;
  - `cas_list`, `cas_list_map` and `cas_describe_map` hold the per-engine
    functions.

## Examples

```python
from datetime import timedelta
from casctl.util import convert_to_ibytes, duration, get_used_percentage

convert_to_ibytes("1.65GB")                  # '1.5GiB'
convert_to_ibytes("1766215")                 # '1.7MiB'
duration(timedelta(minutes=1, seconds=59))   # '1m59s'
get_used_percentage("12 GiB", "1 GiB")       # 8.333333333333332
```

```python
from casctl.units import Quantity

total = Quantity.parse("4Gi")
total.add(Quantity.parse("1Gi"))
str(total)                                   # '5Gi'
```

```python
from casctl import storage
from casctl.constants import LVM_CAS_TYPE
from casctl.volume import dispatch

columns, rows = storage.get_volume_groups(client, None)
storage.get(client, None, "", LVM_CAS_TYPE)        # prints the LVM table
rows = dispatch.get(client, None, "", "")          # volumes of every engine
dispatch.describe(client, ["pvc-1"], "")
```

## Errors

Failures raise exceptions; they are not returned as status values:

- An empty listing of one engine raises `LookupError`, for example
  "no cstor pools are found".
- An unsupported cas-type passed to `storage.get` or `storage.describe`
  raises `ValueError`.
- A failed cStor, Jiva or ZFS volume listing raises `RuntimeError`. So does a
  failed LVM volume listing, provided the PV list is not empty.

When a dispatcher runs every engine, it skips any engine whose function fails.

## What it does not do

`casctl` ships no command-line program and no way of connecting to a cluster.
It contains no client implementation: fetching the resources is left to the
`client` object you pass in.