"""Adapters to convert Pydantic validation models to domain models."""

from __future__ import annotations

from trawlarr.domain.indexers import definition_schema as domain
from trawlarr.infrastructure.indexers.cardigann import validation_schema as infra


def to_domain_filters(filters: list[infra.FilterModel]) -> list[domain.FilterDefinition]:
    out: list[domain.FilterDefinition] = []
    for f in filters:
        if f.args is None:
            args = []
        elif isinstance(f.args, list):
            args = list(f.args)
        else:
            args = [f.args]
        out.append(domain.FilterDefinition(name=f.name, args=args))
    return out


def to_domain_caps(pydantic: infra.CapsModel) -> domain.CapsDefinition:
    """Convert the caps block to domain model."""
    return domain.CapsDefinition(
        categories=dict(pydantic.categories),
        categorymappings=[
            domain.CategoryMappingDefinition(
                id=m.id, cat=m.cat, desc=m.desc, default=m.default
            )
            for m in pydantic.categorymappings
        ],
        modes={mode: list(params) for mode, params in pydantic.modes.items()},
        allow_raw_search=pydantic.allowrawsearch,
    )


def to_domain_settings(
    settings: list[infra.SettingsFieldModel],
) -> list[domain.SettingsField]:
    return [
        domain.SettingsField(
            name=s.name,
            type=s.type,
            label=s.label,
            default=s.default,
            options=dict(s.options),
        )
        for s in settings
    ]


def to_domain_login(pydantic: infra.LoginModel) -> domain.LoginBlock:
    return domain.LoginBlock(
        path=pydantic.path,
        submitpath=pydantic.submitpath,
        method=pydantic.method,
        form=pydantic.form,
        inputs=dict(pydantic.inputs),
        test=domain.LoginTest(path=pydantic.test.path, selector=pydantic.test.selector)
        if pydantic.test
        else None,
    )


def to_domain_field(pydantic: infra.FieldModel) -> domain.FieldDefinition:
    return domain.FieldDefinition(
        selector=pydantic.selector,
        text=pydantic.text,
        attribute=pydantic.attribute,
        optional=pydantic.optional,
        default=pydantic.default,
        filters=to_domain_filters(pydantic.filters),
        case=dict(pydantic.case),
    )


def to_domain_search(pydantic: infra.SearchModel) -> domain.SearchBlock:
    """Convert the search block to domain model."""
    return domain.SearchBlock(
        path=pydantic.path,
        paths=[
            domain.SearchPathDefinition(
                path=p.path,
                categories=list(p.categories),
                response_type=p.response.type if p.response else None,
            )
            for p in pydantic.paths
        ],
        inputs=dict(pydantic.inputs),
        rows=domain.RowsDefinition(
            selector=pydantic.rows.selector,
            after=pydantic.rows.after,
            count_selector=pydantic.rows.count.selector
            if pydantic.rows.count
            else None,
        )
        if pydantic.rows
        else None,
        fields={name: to_domain_field(f) for name, f in pydantic.fields.items()},
    )


def to_domain_download(pydantic: infra.DownloadModel) -> domain.DownloadBlock:
    return domain.DownloadBlock(
        selectors=[
            domain.DownloadSelector(
                selector=s.selector,
                attribute=s.attribute,
                filters=to_domain_filters(s.filters),
            )
            for s in pydantic.selectors
        ],
        method=pydantic.method,
    )


def to_domain_definition(
    pydantic: infra.IndexerDefinitionModel,
) -> domain.IndexerDefinition:
    """Convert a validated YAML document to the domain definition."""
    return domain.IndexerDefinition(
        id=pydantic.id,
        name=pydantic.name,
        links=list(pydantic.links),
        description=pydantic.description,
        language=pydantic.language,
        type=pydantic.type,
        encoding=pydantic.encoding,
        request_delay=pydantic.request_delay,
        replaces=list(pydantic.replaces),
        legacylinks=list(pydantic.legacylinks),
        caps=to_domain_caps(pydantic.caps),
        settings=to_domain_settings(pydantic.settings),
        login=to_domain_login(pydantic.login) if pydantic.login else None,
        search=to_domain_search(pydantic.search) if pydantic.search else None,
        download=to_domain_download(pydantic.download) if pydantic.download else None,
    )
