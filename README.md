# nutskv

Storage-level building blocks for an embedded key/value store. The package
needs nothing outside the standard library.

- `nutskv.entry` holds the record format. `MetaData` has the sizes, the
  timestamp, the TTL, the flag, the status, the data-structure code, the
  transaction id and the CRC. `Entry.encode()` writes a 42-byte little-endian
  header, then the bucket, the key and the value, with a CRC32 of everything
  after the first four bytes placed in front. `parse_meta` and
  `parse_payload` read a record back. `parse_payload` raises
  `PayloadSizeMismatchError` when the data is shorter than the sizes in the
  meta data, and `check_payload_size` raises it when a size differs.
- `nutskv.fd_manager` provides `FdManager`, an LRU cache of open files keyed
  by normalised path.
  - `get_fd` opens a file, or reuses it from the cache, and counts one use.
    `reduce_using` gives that use back.
  - Once the cache holds `clean_threshold_nums` files, files with no users
    are closed, least recently used first.
  - When the cache is already at `max_fd_nums`, the file is opened but not
    cached, and the caller must close it.
  - `paths()`, `using(path)`, `close_by_path(path)` and `close()` complete the
    interface. The manager can also be used as a context manager.
- `nutskv.ds.list_store` provides `List`, Redis-style lists of byte strings
  keyed by name: `rpush`, `lpush`, `lpop`, `rpop`, `lpeek`, `rpeek`, `size`,
  `lrange`, `lrem`, `lrem_num`, `lset`, `ltrim`, `lrem_by_index`,
  `lrem_by_index_pre_check`, `is_empty`, `is_expire` and `get_list_ttl`. A key
  expires when you give it a lifetime in `List.ttl` and a Unix start time in
  `List.timestamp`. A lifetime of 0 means the key never expires. An expired
  key is dropped the next time it is looked at.
- `nutskv.ds.set_store` provides `Set`, Redis-style sets of byte strings:
  `sadd`, `srem`, `spop`, `scard`, `shas_key`, `sis_member`, `sare_members`,
  `smembers`, `sdiff`, `sinter`, `sunion`, `smove` and `keys`.
- `nutskv.ds.sorted_set` provides `SortedSet`, a skip list ordered by score
  and then by key. It offers `put`, `remove`, `peek_min`/`peek_max`,
  `pop_min`/`pop_max`, `get_by_key`, `get_by_rank`, `get_by_rank_range`
  (1-based ranks; negative ranks count from the end), `get_by_score_range`
  (with `GetByScoreRangeOptions` for a limit and open bounds), `find_rank` and
  `find_rev_rank`.
- `nutskv.errors` holds the exception types (`NutsError`, `DBClosedError`,
  `KeyNotFoundError`, `BucketNotFoundError`, `BucketEmptyError`,
  `KeyEmptyError`, `PrefixScanError`, `PrefixSearchScanError`). The `is_*`
  predicates recognise each type, also when it is the cause or context of
  another exception.

## Installation

```
pip install .
```

To also install the test requirements:

```
pip install ".[test]"
```

## Examples

Encoding and reading back a record:

```python
from nutskv.entry import DATA_ENTRY_HEADER_SIZE, Entry, MetaData

meta = MetaData(key_size=3, value_size=3, bucket_size=6, timestamp=1547707905)
entry = Entry(key=b"key", value=b"val", bucket=b"bucket", meta=meta)
raw = entry.encode()
assert len(raw) == entry.size()

decoded = Entry()
decoded.parse_meta(raw)
decoded.parse_payload(raw[DATA_ENTRY_HEADER_SIZE:])
assert decoded.key == b"key"
```

Lists:

```python
from nutskv.ds.list_store import List

lists = List()
lists.rpush("jobs", b"a", b"b", b"c")
lists.lpop("jobs")            # b"a"
lists.lrange("jobs", 0, -1)   # [b"b", b"c"]
```

Sets:

```python
from nutskv.ds.set_store import Set

sets = Set()
sets.sadd("s1", b"a", b"b", b"c")
sets.sadd("s2", b"c", b"d")
sorted(sets.sdiff("s1", "s2"))  # [b"a", b"b"]
```

Sorted sets:

```python
from nutskv.ds.sorted_set import SortedSet

zset = SortedSet()
zset.put("alice", 70, b"a")
zset.put("bob", 90, b"b")
zset.put("carol", 86, b"c")
[n.key for n in zset.get_by_score_range(80, 100, None)]  # ["carol", "bob"]
zset.find_rank("carol")                                  # 2
zset.find_rev_rank("alice")                              # 3
```

Errors:

```python
from nutskv.errors import KeyNotFoundError, is_key_not_found

try:
    raise KeyNotFoundError("missing")
except KeyNotFoundError as exc:
    assert is_key_not_found(exc)
```

## What this package does not do

These are parts, not a database. The package has no database object, no
buckets, no transactions and no iterators. Nothing writes encoded entries to
data files or reads them back from disk. The list, set and sorted-set
structures live only in memory. The package has no command-line tool and no
server.

## Running the tests

```
pytest
```