# zeget

A library for finding, verifying and unpacking prebuilt release binaries,
mostly those attached to GitHub releases.

## Installation

```
pip install zeget
```

To run the test suite:

```
pip install "zeget[test]"
pytest
```

## Modules

- `zeget.finders`: look up release assets. `GithubAssetFinder(repo, tag,
  prerelease, min_time)` queries the GitHub releases API; `find(client)`
  returns a list of `Asset`. A tag is given as `latest` or `tags/<tag>`;
  when a `tags/...` lookup returns 404 the release list is searched page by
  page for a tag containing the wanted one (`find_match` does that search
  directly). It raises `GitHubError` for unexpected HTTP statuses,
  `NoUpgradeError` when the release was created before `min_time`, and
  `LookupError` when no tag matches. `get_latest_tag(client)` returns the tag
  of the latest release. `GithubSourceFinder` returns the source tarball
  URL of a tag, and `DirectAssetFinder` wraps a plain URL as the only asset.
- `zeget.github`: `ApiClient` (a small `urllib` client whose `get_json`
  returns an `HttpResponse` rather than raising on HTTP error statuses),
  the models `Release` (with `Release.from_json`), `ReleaseAsset` and
  `Asset`, the error `GitHubError`, and `fetch_rate_limit(client)`, which
  returns the core `RateLimit`.
- `zeget.filters`: asset filters `any(...)`, `all(...)`, `has(...)`,
  `none(...)` and `ext(...)`, available in `FILTER_MAP`.
  `parse_definition("ext(.zip)")` returns a `Filter` or `None`;
  `parse_definitions` splits on `;` and drops unknown definitions.
  `Filter.apply(asset)` runs the filter's handler, and `Filter.action`
  (`FilterAction.INCLUDE` or `FilterAction.EXCLUDE`) says what a match means.
- `zeget.verifiers`: checksum checks. `Sha256Verifier(expected_hex)` checks
  against a known digest, `Sha256AssetVerifier(asset_url, asset, client)`
  reads the digest from a `.sha256` asset, and
  `Sha256SumFileAssetVerifier(sha256sum_asset_url, ...)` looks for the
  digest in a `sha256sums`-style listing. A mismatch raises `Sha256Error`.
  `NoVerifier` accepts anything, `Sha256Printer` prints the digest.
  `determine_hash_type_by_length` guesses a `HashAlgorithm`.
- `zeget.extraction`: `new_extractor(filename, tool, chooser)` picks how to
  handle a download by its name: tar archives (plain, `.tar.gz`/`.tgz`,
  `.tar.bz2`/`.tbz`, `.tar.xz`/`.txz`, `.tar.zst`) and `.zip` archives go to
  an `ArchiveExtractor`; single `.gz`, `.bz2`, `.xz` and `.zst` files are
  decompressed by a `SingleFileExtractor`; anything else is copied as is.
  Choosers (`BinaryChooser`, `GlobChooser`, `LiteralFileChooser`) decide
  which archive entry to take; a chosen directory is extracted as a tree.
- `zeget.registry`: a JSON lock file of installed packages. `LockFile.load`
  reads one or starts an empty one; `add_or_update_package`,
  `get_package`, `remove_package`, `remove_package_at` and `save` manage it.
  `delete_asset_and_binary` removes installed files.
- `zeget.reporters`: `MessageReporter` and `AssetSha256HashReporter` write
  `›`-prefixed lines to a text stream.
- `zeget.targetfile`: `get_target_file(filename, mode, remove_existing)`
  opens an output file (`-` means standard output) as a `TargetFile`, which
  is also a context manager.
- `zeget.files`, `zeget.home`, `zeget.utilities`, `zeget.appinfo`: archive
  entry and symlink types, `~` expansion and compaction, helpers for URLs,
  repository references and executable detection, and the application
  name and version.

## Example

```python
from zeget.extraction import BinaryChooser, CandidatesError, new_extractor
from zeget.finders import GithubAssetFinder
from zeget.github import ApiClient
from zeget.verifiers import Sha256Verifier

assets = GithubAssetFinder(repo="owner/tool", tag="latest").find(ApiClient())
for asset in assets:
    print(asset.name, asset.download_url)

filename = "tool-v1.0.0-x86_64-linux.tar.gz"
with open(filename, "rb") as handle:
    data = handle.read()

Sha256Verifier("<expected sha256 hex digest>").verify(data)

extractor = new_extractor(filename, "tool", BinaryChooser("tool"))
try:
    chosen = extractor.extract(data, False)
except CandidatesError as exc:
    chosen = exc.candidates[0]
chosen.extract("./tool")
```

`extract` returns the single matching `ExtractedFile`. When nothing
matches, or more than one file could be the binary, it raises
`CandidatesError`, whose `candidates` list lets the caller pick one.

## What the package does not do

There is no command-line program: the package is a set of building blocks.
It does not download release assets itself (`ApiClient` only fetches JSON
documents and checksum files), does not choose an asset for the current
platform, and does not run a complete install; putting finders, verifiers,
extractors and the lock file together is left to the caller.