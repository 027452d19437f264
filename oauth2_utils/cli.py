import logging

import click

from oauth2_utils.config import LOG_FORMATS, LOG_LEVELS, get_settings
from oauth2_utils.observability import setup_logging
from oauth2_utils.params import VALIDATORS
from oauth2_utils.registry import (
    REGISTRIES,
    ParameterLocation,
    RegistryError,
    filter_registry,
    get_parameters_for_location,
    get_registry,
    parse_location,
    parse_standard_sets,
)
from oauth2_utils.scope import (
    MalformedScopeParameter,
    ScopeSet,
    invalid_scope_tokens,
    is_scope_parameter,
)

logger = logging.getLogger(__name__)


def _standard_sets_option(func):
    return click.option(
        "--standard-set",
        "-s",
        "standard_sets",
        multiple=True,
        type=click.Choice(["oauth2", "oidc", "uma2"], case_sensitive=False),
        help="Standard set to include. Can be specified multiple times. "
        "Defaults to OAUTH2_UTILS_STANDARD_SETS (oauth2).",
    )(func)


def _resolve_standard_sets(names: tuple[str, ...]):
    if not names:
        try:
            return get_settings().standard_sets
        except ValueError as e:
            raise click.ClickException(str(e))
    try:
        return parse_standard_sets(names)
    except RegistryError as e:
        raise click.BadParameter(str(e), param_hint="--standard-set")


def _parse_scopes(value: str, param_hint: str) -> ScopeSet:
    try:
        return ScopeSet.from_parameter(value)
    except MalformedScopeParameter as e:
        raise click.BadParameter(str(e), param_hint=param_hint)


@click.group()
@click.option(
    "--log-level",
    "-l",
    envvar="LOG_LEVEL",
    default="warning",
    show_default=True,
    type=click.Choice([level.lower() for level in LOG_LEVELS], case_sensitive=False),
    help="Logging level (can also use LOG_LEVEL env var)",
)
@click.option(
    "--log-format",
    envvar="LOG_FORMAT",
    default="text",
    show_default=True,
    type=click.Choice(LOG_FORMATS, case_sensitive=False),
    help="Log output format (can also use LOG_FORMAT env var)",
)
def cli(log_level: str, log_format: str):
    """OAuth2 utilities: scope parsing and IANA registry lookups.

    \b
    Examples:
      $ oauth2-utils scope check "openid profile notes:read"
      $ oauth2-utils scope normalize "b a b"
      $ oauth2-utils registry list grant_types -s oauth2
      $ oauth2-utils param check client-id my_client_23
    """
    setup_logging(log_format=log_format, log_level=log_level)


@cli.group()
def scope():
    """Scope parameter commands (RFC6749 section 3.3)."""
    pass


@scope.command()
@click.argument("parameter")
def check(parameter: str):
    """Check that PARAMETER is a well-formed scope parameter.

    \b
    Example:
      $ oauth2-utils scope check "users:read feed:edit"
    """
    if is_scope_parameter(parameter):
        click.echo("valid")
        return

    click.echo(click.style("✗ Malformed scope parameter", fg="red"), err=True)
    bad_segments = invalid_scope_tokens(parameter)
    for segment in bad_segments:
        if segment:
            click.echo(f"  invalid scope token: {segment!r}", err=True)
        else:
            click.echo("  empty scope token (extra space?)", err=True)
    raise click.ClickException(
        f"{len(bad_segments)} invalid segment(s) in scope parameter"
    )


@scope.command()
@click.argument("parameter")
@click.option(
    "--allow-empty",
    is_flag=True,
    default=False,
    help="Treat an empty PARAMETER as no scopes instead of an error",
)
def normalize(parameter: str, allow_empty: bool):
    """Print the canonical form of PARAMETER (sorted, deduplicated).

    \b
    Example:
      $ oauth2-utils scope normalize "b a b"
      a b
    """
    if allow_empty and parameter == "":
        scopes = ScopeSet.empty()
    else:
        scopes = _parse_scopes(parameter, "PARAMETER")
    logger.debug(f"Normalized {len(scopes)} scopes")
    click.echo(scopes.to_parameter())


@scope.command()
@click.argument("requested")
@click.argument("granted")
def diff(requested: str, granted: str):
    """Compare REQUESTED scopes with GRANTED scopes.

    \b
    Example:
      $ oauth2-utils scope diff "notes:read notes:write" "notes:read openid"
      missing: notes:write
      extra: openid
    """
    requested_scopes = _parse_scopes(requested, "REQUESTED")
    granted_scopes = _parse_scopes(granted, "GRANTED")

    click.echo(f"missing: {(requested_scopes - granted_scopes).to_parameter()}")
    click.echo(f"extra: {(granted_scopes - requested_scopes).to_parameter()}")


@cli.group()
def registry():
    """IANA OAuth parameter registry lookups."""
    pass


@registry.command(name="list")
@click.argument("table", type=click.Choice(sorted(REGISTRIES)))
@_standard_sets_option
def list_(table: str, standard_sets: tuple[str, ...]):
    """Print the names registered in TABLE, one per line.

    \b
    Examples:
      $ oauth2-utils registry list grant_types
      $ oauth2-utils registry list extension_errors -s oidc -s uma2
    """
    for name in filter_registry(
        get_registry(table), _resolve_standard_sets(standard_sets)
    ):
        click.echo(name)


@registry.command()
@click.argument(
    "location", type=click.Choice([location.value for location in ParameterLocation])
)
@_standard_sets_option
def parameters(location: str, standard_sets: tuple[str, ...]):
    """Print the parameters allowed in LOCATION, one per line.

    \b
    Example:
      $ oauth2-utils registry parameters authorization_response -s oauth2 -s oidc
    """
    for name in get_parameters_for_location(
        parse_location(location), _resolve_standard_sets(standard_sets)
    ):
        click.echo(name)


@cli.group()
def param():
    """RFC6749 parameter syntax checks."""
    pass


@param.command(name="check")
@click.argument("kind", type=click.Choice(sorted(VALIDATORS)))
@click.argument("value")
def param_check(kind: str, value: str):
    """Check that VALUE is a syntactically valid KIND parameter.

    \b
    Example:
      $ oauth2-utils param check refresh-token tGzv3JOkF0XG5Qx2TlKWIA
    """
    parameter_name = kind.replace("-", "_")
    logger.debug(f"Checking {parameter_name} ({len(value)} characters)")

    if VALIDATORS[kind](value):
        click.echo("valid")
        return

    click.echo(click.style(f"✗ Invalid {kind} parameter", fg="red"), err=True)
    raise click.ClickException(f"{parameter_name} does not match the RFC6749 syntax")


if __name__ == "__main__":
    cli()
