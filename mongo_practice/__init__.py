"""mongo_practice package initializer

Runnable MongoDB study examples built on pymongo. Each demo module has a
``main()`` and can be run with ``python -m mongo_practice.<module>``:

- ``basic_crud``: inserts, query operators, updates and deletes
- ``aggregation``: aggregation pipelines over a small e-commerce data set
- ``odm_examples``: pydantic models, validators, populate and transactions
- ``indexing_performance``: index types and explain plans

The server address and database names come from the environment (see
``connect_db``).
"""

__all__ = [
    "aggregation",
    "basic_crud",
    "connect_db",
    "create_collections",
    "explain",
    "indexing_performance",
    "models",
    "odm_examples",
    "pipelines",
    "sample_data",
    "schema",
]
