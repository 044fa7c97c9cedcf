# clairscan

Building blocks for scanning container image layers for vulnerable packages.
A layer's files are handed around as a mapping from path (without a leading
slash) to bytes.

## What is in it

- **Severities** (`clairscan.severity`): the `Severity` enum, from `UNKNOWN`
  through `NEGLIGIBLE`, `LOW`, `MEDIUM`, `HIGH`, `CRITICAL` to `DEFCON1`, and
  `SEVERITIES` in that order. `parse_severity` reads a name without regard to
  case and raises `SeverityParseError` for anything else. `is_valid_severity`
  tells whether a string names a severity exactly. `Severity.compare` returns
  the difference in rank: zero when equal, negative when lower, positive when
  higher.
- **Package listers** (`clairscan.apk`, `clairscan.dpkg`, `clairscan.rpm`):
  `ApkLister` reads `lib/apk/db/installed`, `DpkgLister` reads
  `var/lib/dpkg/status` (preferring source package names and source
  versions), and `RpmLister` writes `var/lib/rpm/Packages` to a temporary
  directory and queries it with the `rpm` tool, which must be installed; if
  the query fails it returns an empty list. Each returns a list of distinct
  `Feature(name, version, version_format)` objects, and
  `required_filenames()` names the files it reads.
- **Namespace detectors** (`clairscan.alpinerelease`, `clairscan.lsbrelease`,
  `clairscan.osrelease`, `clairscan.redhatrelease`):
  `AlpineReleaseDetector`, `LsbReleaseDetector`, `OsReleaseDetector` and
  `RedhatReleaseDetector` return a `Namespace(name, version_format)` such as
  `debian:8`, `ubuntu:12.04`, `alpine:v3.3` or `centos:7`, or `None`.
- **Registries**: `ListerRegistry` (`clairscan.featurefmt`) and
  `DetectorRegistry` (`clairscan.featurens`) hold named listers and detectors
  and run a chosen set of them over a layer; unknown names are logged and
  skipped, and registering a name twice raises `ValueError`.
  `DetectorRegistry.detect` returns one namespace per distinct name.
- **Image extraction** (`clairscan.imagefmt`): `ExtractorRegistry` holds
  `Extractor` implementations by lower-cased format name. `extract` opens a
  layer from a local path or over HTTP(S) (with optional headers, and with
  certificate checks turned off by `set_insecure_tls(True)`) and passes it to
  the extractor for the format. A layer that cannot be opened or downloaded
  raises `LayerNotFoundError`; an unknown format raises
  `UnsupportedFormatError`. Both are `BadRequestError`s.
- **Pagination tokens** (`clairscan.token`, `clairscan.pagination`):
  `marshal` and `unmarshal` encrypt JSON values as Fernet tokens that expire
  after an hour (`InvalidTokenError` otherwise). `encrypt_page` and
  `decrypt_page` do the same for an `IdPageNumber`. `Config` holds store
  settings, and `parse_connection_string` splits a connection URL into its
  database name and a URL pointing at `/postgres`.
- **SQL builders** (`clairscan.queries`): `query_string`, `query_insert`,
  `query_persist`, `quote_identifier` and the table-specific `query_*`
  functions build PostgreSQL statements with numbered `$n` placeholders for
  bulk inserts and lookups.

## Example

```python
from clairscan.featurens import DetectorRegistry
from clairscan.osrelease import OsReleaseDetector
from clairscan.alpinerelease import AlpineReleaseDetector

registry = DetectorRegistry()
registry.register("os-release", OsReleaseDetector())
registry.register("alpine-release", AlpineReleaseDetector())

files = {
    "etc/os-release": b'ID=debian\nVERSION_ID="8"\n',
    "etc/alpine-release": b"3.3.4",
}
for namespace in registry.detect(files, registry.names()):
    print(namespace.name, namespace.version_format)
```

```python
from clairscan.pagination import IdPageNumber, encrypt_page, decrypt_page
from cryptography.fernet import Fernet
from clairscan.severity import Severity, parse_severity

assert parse_severity("high") is Severity.HIGH
assert Severity.CRITICAL.compare(Severity.LOW) > 0

key = Fernet.generate_key().decode()
assert decrypt_page(encrypt_page(IdPageNumber(4), key), key) == IdPageNumber(4)
```

## What it does not do

- There is no database store: the SQL builders only produce statement text,
  and nothing here connects to PostgreSQL or runs migrations.
- No extractors for concrete image formats are included; supply your own
  `Extractor` subclasses to `ExtractorRegistry`.
- Package versions are not parsed or compared; listers only reject empty
  versions.
- There is no command-line program or server.

## Installation

```
pip install .
```

## Running the tests

```
pip install .[test]
pytest
```