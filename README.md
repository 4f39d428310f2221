# pmuevents

Read named CPU performance-monitoring events from JSON event lists (such
as the per-CPU lists published for Intel processors), look them up by
name, list them, and map raw event codes back to names.

## What is in the package

- `pmuevents.jsmn` – a small non-strict JSON tokenizer. `tokenize(text,
  max_tokens=None)` returns `Token` objects (type, start, end, number of
  children) and raises `NotEnoughTokens`, `InvalidJson` or `PartialJson`
  (all subclasses of `JsmnError`).
- `pmuevents.jsonfile` – `parse_json(path)` reads and tokenizes a file,
  returning its text and tokens, or raises `JsonFileError`. Helpers:
  `json_line`, `json_name`, `json_len`, `json_streq`.
- `pmuevents.events` – turns each event object of an event list into an
  `EventRecord(name, event, desc, pmu)`, where `event` is a perf style
  string such as `umask=0x1,event=0xc0`. `parse_event_file(path)` returns
  all records; `json_events(path, func)` calls `func` for each record and
  stops at the first true result; `default_event_file(kind, env)` finds the
  default list. Layout errors raise `EventFileError`.
- `pmuevents.cpustr` – reads vendor, family, model and stepping from
  `/proc/cpuinfo` (`read_cpu_signature`) and builds identifiers such as
  `GenuineIntel-6-55-core` (`format_cpu_str`, `get_cpu_str_type`,
  `get_cpu_str`).
- `pmuevents.cache` – `EventCache`, a case-insensitive table of events:
  `read_events(path)`, `lookup(name)`, `walk()` and `rmap(code)`.
- `pmuevents.hist` – `Histogram`, counting sampled values and reporting
  them by frequency (`add`, `report`, `format`).
- `pmuevents.clustering` – `calc_classify(items, alpha, key)` groups items
  into clusters of similar metric values; `calc_classify_fake` puts all
  items in one group; `hash_sequence(values)` combines integers into a
  64-bit hash.
- `pmuevents.pttrace` – `find_tsc(data, offset)` and
  `find_trace_start(data)` locate the packet stream boundary with the
  oldest time stamp in a Processor Trace ring buffer held in memory.

## Installation

```
pip install .
```

No third-party libraries are needed at run time.

## Where event lists are looked for

When no file is given, `default_event_file` picks one:

1. the file named by `EVENTMAP`, if it is readable (otherwise `EVENTMAP`
   followed by the kind, e.g. `-core`, is used in place of the CPU
   identifier);
2. `pmu-events/<cpu>.json` under `JEVENTS_CACHEDIR`, else under
   `XDG_CACHE_HOME`, else under `$HOME/.cache`.

A file whose name includes the CPU stepping is preferred when it is
readable. With no path, `json_events` and `EventCache` read the core list
and then the uncore list if one can be read.

## Command-line tools

List all events, sorted by name, as `name  pmu/event/`:

```
pmu-listevents
```

`-v` as the first argument also prints descriptions; a following argument
is a shell pattern the names must match:

```
pmu-listevents -v 'inst_retired.*'
```

Map raw event codes (event in the low byte, unit mask in the next) back to
their names and descriptions; codes with no match print `not found`:

```
pmu-rmap 0xc0 0x1c2
```

Both commands read the default event lists described above.

## Library use

```python
from pmuevents.cache import EventCache

cache = EventCache()
cache.read_events("my-cpu-events.json")

print(cache.lookup("INST_RETIRED.ANY"))   # e.g. "cpu/event=0xc0/"
for name, event, desc in cache.walk():
    print(name, event)
print(cache.rmap(0xC0))                   # (name, description)
```

`lookup` and `rmap` raise `KeyError` when nothing matches.

```python
from pmuevents.hist import Histogram

hist = Histogram()
for address in (0x1000, 0x1000, 0x2000):
    hist.add(address)
print(hist.format(0.001))
```

## What it does not do

The package works on event lists and in-memory data only. It does not
open, program or read hardware performance counters, does not turn event
strings into kernel event attributes, does not download event lists, and
does not capture Processor Trace data; the trace functions take a buffer
that the caller already has.

## Running the tests

```
pip install ".[test]"
pytest
```