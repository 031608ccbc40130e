"""Participant reconciliation engine.

This package is the single place where the displayed participant set is
turned into grid slots and batches of grid operations.  Nothing here
suspends or talks to the calling SDK; scheduling lives in
:mod:`callgrid.scheduler` and wiring in :mod:`callgrid.controller`.
"""
