"""
Importers sub-package for pipette.

Contains format-specific importers that hand a file to one backend
parser and return a standardized intermediate result (payload + backend
identity).

Design: Strategy Pattern
- base.py defines the BaseImporter ABC (protocol) and RawResult.
- delim.py implements DelimImporter for CSV/TSV/TXT (four engines).
- excel.py, prism.py: spreadsheet-like formats.
- rnative.py: R data files, returned unmodified.
- sparse.py: MatrixMarket matrices with optional name sidecars.
- serialization.py: JSON and YAML documents.
- genesets.py: GMT and GMX/GRP gene sets.
- intervals.py: genomic interval and coverage files.
- lines.py: source code and logs read as lines.
- bcbio.py: count matrices, delegating to the TSV import.
- tabular.py: catch-all for rarely used tabular formats.

The registry (registry.py) selects the importer class for a resolved
format tag at runtime.
"""
