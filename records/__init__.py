"""Hospital record-keeping application.

This package holds the append-only record store, the validation layer
that guards every add, and the API views through which the front-end
forms list and create departments, doctors, patients, clinical events
and rooms.
"""
