"""
Repair steps.

Modules:
  base.py — StepOutcome, StepResult and the generic RepairStep runner.
  dism.py — component store repair (DISM /RestoreHealth).
  sfc.py  — system file integrity scan (SFC /scannow).

DISM always runs before SFC: SFC repairs from the component store, so
the store must be healthy first.
"""
