"""Domain layer for budgetkit: entities, errors and services.

Services are imported from their modules (``budgetkit.domain.csv_import``
and so on); this package only groups them.
"""
