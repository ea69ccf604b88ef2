# Presence of this file puts the repository root on sys.path so the tests can
# import `plantgeom` from a fresh clone without installing it first.
