"""
Ingestion collaborator: turns billing exports into a ``ConsumptionSeries``.

consumption_file : COLUMN_SYNONYMS + resolve_columns() + normalize_rows()
                   + load_consumption_file()
"""
