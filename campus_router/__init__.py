"""Campus router package.

Submodules are imported explicitly; importing the package itself sets up
nothing, so logging and the workbook backend load only when used.
"""

__all__: list[str] = []
