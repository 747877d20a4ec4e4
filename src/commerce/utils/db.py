from protean.domain import Domain
from sqlalchemy import create_engine

_RDBMS_PROVIDERS = ("sqlite", "postgresql")


def _register_models(domain: Domain, provider):
    """Force every aggregate and entity bound to `provider`, and the provider's
    outbox, to register its model.

    Accessing the repository's `_dao` makes Protean build the SQLAlchemy model,
    which is what adds the table to the provider's metadata.
    """
    for _, aggregate_record in domain.registry.aggregates.items():
        if aggregate_record.cls.meta_.provider == provider.name:
            domain.repository_for(aggregate_record.cls)._dao  # noqa: B018

    for _, entity_record in domain.registry.entities.items():
        if entity_record.cls.meta_.provider == provider.name:
            domain.repository_for(entity_record.cls)._dao  # noqa: B018

    # Outbox repositories are internal and not listed in the registry
    outbox_repos = getattr(domain, "_outbox_repos", None) or {}
    if provider.name in outbox_repos:
        outbox_repos[provider.name]._dao  # noqa: B018


def setup_db(domain: Domain):
    """Create the database schema for every relational provider of the domain."""
    with domain.domain_context():
        for _, provider in domain.providers.items():
            if provider.conn_info["provider"] in _RDBMS_PROVIDERS:
                engine = create_engine(provider.conn_info["database_uri"])
                _register_models(domain, provider)
                provider._metadata.create_all(engine)


def drop_db(domain: Domain):
    """Drop the database schema for every relational provider of the domain."""
    with domain.domain_context():
        for _, provider in domain.providers.items():
            if provider.conn_info["provider"] in _RDBMS_PROVIDERS:
                engine = create_engine(provider.conn_info["database_uri"])
                provider._metadata.drop_all(engine)
