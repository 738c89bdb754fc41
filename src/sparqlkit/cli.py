"""Command line interface for :mod:`sparqlkit`."""

import json
import logging
from typing import Optional

import click

from .bank import Bank
from .config import DEFAULT_TIMEOUT, ResolverConfig, get_config
from .errors import SparqlError
from .repo import Repo, basic_auth, digest_auth
from .terms import IRI, BlankNode, LangLiteral, Term
from .version import VERSION

__all__ = [
    "main",
]


def _parse_params(params: tuple[str, ...]) -> dict[str, str]:
    """Turn ``KEY=VALUE`` options into a dict."""
    parsed = {}
    for param in params:
        key, sep, value = param.partition("=")
        if not sep or not key:
            raise click.BadParameter(f"expected KEY=VALUE, got {param!r}", param_hint="--param")
        parsed[key] = value
    return parsed


def term_text(term: Term) -> str:
    """Plain text of a term: the IRI, blank node label or literal text."""
    if isinstance(term, IRI):
        return term.value
    if isinstance(term, BlankNode):
        return term.label
    if isinstance(term, LangLiteral):
        return term.value
    return term.lexical


def _columns(solution: dict[str, Term], declared: list[str]) -> list[str]:
    """Bound variables of a solution, declared ones first in head order."""
    columns = [var for var in declared if var in solution]
    columns += [var for var in solution if var not in columns]
    return columns


@click.group()
@click.version_option(version=VERSION)
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose logging")
@click.pass_context
def main(ctx: click.Context, verbose: bool) -> None:
    """sparqlkit - query SPARQL endpoints and print typed results."""
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose

    if verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
            force=True,
        )
        logging.getLogger("sparqlkit").setLevel(logging.DEBUG)
    else:
        logging.basicConfig(level=logging.WARNING, format="%(levelname)s: %(message)s", force=True)


@main.command()
@click.option("--endpoint", required=True, help="SPARQL endpoint URL")
@click.option("--query", "query_text", help="SPARQL query to run")
@click.option("--bank", "bank_file", type=click.Path(exists=True, dir_okay=False), help="Query bank file")
@click.option("--tag", help="Tag of the query to run from --bank")
@click.option("--param", multiple=True, help="Template value as KEY=VALUE (repeatable)")
@click.option("--date-format", help="strptime layout for xsd:dateTime values")
@click.option("--user", help="Username for HTTP authentication")
@click.option("--password", default="", help="Password for HTTP authentication")
@click.option("--digest", is_flag=True, help="Use digest instead of basic authentication")
@click.option("--timeout", type=float, default=DEFAULT_TIMEOUT, show_default=True, help="Timeout in seconds")
@click.option("--format", "output_format", type=click.Choice(["table", "json"]), default="table")
@click.option("--n3", is_flag=True, help="Print terms in N-Triples syntax")
def query(
    endpoint: str,
    query_text: Optional[str],
    bank_file: Optional[str],
    tag: Optional[str],
    param: tuple[str, ...],
    date_format: Optional[str],
    user: Optional[str],
    password: str,
    digest: bool,
    timeout: float,
    output_format: str,
    n3: bool,
) -> None:
    """Run a SELECT query and print one line per solution.

    The query is given inline with --query, or picked from a query bank
    with --bank and --tag, where --param values fill its placeholders.


    Example:
      sparqlkit query --endpoint https://query.wikidata.org/sparql \\
        --bank queries.rq --tag byName --param "Name=Bill Gates"
    """
    if query_text is not None and (bank_file or tag):
        raise click.UsageError("--query cannot be combined with --bank or --tag")
    if query_text is None and not (bank_file and tag):
        raise click.UsageError("Give either --query or both --bank and --tag")

    config = ResolverConfig(date_format=date_format) if date_format else get_config()
    auth = None
    if user:
        auth = digest_auth(user, password) if digest else basic_auth(user, password)

    try:
        if query_text is None:
            params = _parse_params(param)
            query_text = Bank.load(bank_file).prepare(tag, params or None)

        with Repo(endpoint, auth=auth, timeout=timeout) as repo:
            results = repo.query(query_text)
    except SparqlError as e:
        click.echo(f"Error: {e}", err=True)
        raise click.Abort()

    render = str if n3 else term_text
    solutions = results.solutions(config)

    if output_format == "json":
        rows = [{var: render(solution[var]) for var in _columns(solution, results.vars)} for solution in solutions]
        click.echo(json.dumps(rows, indent=2, ensure_ascii=False))
        return

    for idx, solution in enumerate(solutions):
        cells = [f"{var}={render(solution[var])}" for var in _columns(solution, results.vars)]
        click.echo(f"{idx}: " + ", ".join(cells))
    click.echo(f"{len(solutions)} solutions")


@main.command()
@click.argument("bank_file", type=click.Path(exists=True, dir_okay=False))
@click.option("--show", "tag", help="Print the query stored under this tag")
@click.option("--param", multiple=True, help="Template value as KEY=VALUE (repeatable)")
def bank(bank_file: str, tag: Optional[str], param: tuple[str, ...]) -> None:
    """List the queries of a bank file, or print one of them."""
    queries = Bank.load(bank_file)

    if tag is None:
        for name in sorted(queries):
            click.echo(name)
        return

    try:
        click.echo(queries.prepare(tag, _parse_params(param) or None))
    except SparqlError as e:
        click.echo(f"Error: {e}", err=True)
        raise click.Abort()


if __name__ == "__main__":
    main()
