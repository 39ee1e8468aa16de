"""hmsrecords — Flat-file hospital record store.

Encodes patient medical records (with nested diagnoses, treatments and
prescriptions) and the staff/patient user list as delimited text files.
"""

__version__ = "1.0.0"
