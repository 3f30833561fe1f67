"""envctl CLI: query, edit and convert .env files.

Examples:
    envctl --file .env --has --env DATABASE_URL          exit 0 if the key exists
    envctl --file .env --is --value secret --print       print YES/NO
    envctl --file .env --add --env PORT --value 8080 --write
    envctl --file .env --rm --env PORT --write
    envctl --file .env --json                            print JSON
    envctl --file .env --mkall --write                   write .env.json, .env.yaml, ...
    envctl --file .env --cleanall --write                delete those exports

Exit status is 0 on success or a positive match, 1 otherwise.
"""

from __future__ import annotations

import logging

import click

from envctl.config import CLIConfig, discover_env_file, load_config, option_defaults
from envctl.engine import Engine
from envctl.errors import EnvctlError
from envctl.models import ExportFormat, Options
from envctl.settings import Settings

logger = logging.getLogger("envctl.cli")


def _configure_logging(verbose: bool) -> None:
    level = logging.INFO if verbose else logging.WARNING
    logging.basicConfig(level=level, format="%(levelname)s %(name)s: %(message)s")
    logging.getLogger("envctl").setLevel(level)


def _flush(lines: list[str]) -> None:
    for line in lines:
        click.echo(line)


@click.command()
@click.version_option(package_name="envctl")
@click.option("--file", "file", default=None, help="Path to env file to process  [default: first of .env, .env.local, .env.development, .env.production]")
@click.option("--env", "env", default="", help="Environment variable name to check, add or remove")
@click.option("--value", "value", default="", help="Environment variable value. Use with --env")
@click.option("--add", is_flag=True, help="Add a new environment variable (never overwrites)")
@click.option("--rm", is_flag=True, help="Remove variables matching --env or --value")
@click.option("--has", is_flag=True, help="Check for an environment variable name")
@click.option("--is", "is_", is_flag=True, help="Check for an environment variable value")
@click.option("--not", "not_", is_flag=True, help="Negate --has or --is")
@click.option("--write", is_flag=True, help="Write changes to --file (creates it if missing)")
@click.option("--init", is_flag=True, help="Create --file if it does not exist")
@click.option("--print", "print_", is_flag=True, help="Print the result before exiting")
@click.option("--verbose", is_flag=True, help="Show verbose output")
@click.option("--prod", is_flag=True, help="Treat --file as a production env file")
@click.option("--mkall", is_flag=True, help="Render all --json --yaml --xml --toml --ini outputs")
@click.option("--cleanall", is_flag=True, help="Remove all --json --yaml --xml --toml --ini outputs")
@click.option("--json", "json_", is_flag=True, help="Output in JSON format")
@click.option("--yaml", "yaml_", is_flag=True, help="Output in YAML format")
@click.option("--xml", "xml_", is_flag=True, help="Output in XML format")
@click.option("--toml", "toml_", is_flag=True, help="Output in TOML format")
@click.option("--ini", "ini_", is_flag=True, help="Output in INI format")
@click.pass_context
def cli(
    ctx: click.Context,
    file: str | None,
    env: str,
    value: str,
    add: bool,
    rm: bool,
    has: bool,
    is_: bool,
    not_: bool,
    write: bool,
    init: bool,
    print_: bool,
    verbose: bool,
    prod: bool,
    mkall: bool,
    cleanall: bool,
    json_: bool,
    yaml_: bool,
    xml_: bool,
    toml_: bool,
    ini_: bool,
) -> None:
    """Read, query, mutate and re-render .env files."""
    cfg: CLIConfig = ctx.obj if isinstance(ctx.obj, CLIConfig) else CLIConfig()
    settings = Settings.from_environment().with_parser(cfg.parser)
    _configure_logging(verbose or settings.verbose)
    if cfg.path is not None:
        logger.info("Loaded config from %s", cfg.path)

    requested = {
        ExportFormat.JSON: json_,
        ExportFormat.INI: ini_,
        ExportFormat.YAML: yaml_,
        ExportFormat.XML: xml_,
        ExportFormat.TOML: toml_,
    }
    options = Options(
        path=file if file is not None else discover_env_file(),
        key=env,
        value=value,
        add=add,
        remove=rm,
        has=has,
        is_=is_,
        negate=not_,
        write=write,
        init=init,
        print_=print_,
        verbose=verbose,
        prod=prod,
        build_all=mkall,
        clean_all=cleanall,
        formats=tuple(fmt for fmt, on in requested.items() if on),
    )

    engine = Engine(options, settings)
    try:
        code = engine.run()
    except EnvctlError as exc:
        _flush(engine.output)
        click.echo(exc.message, err=True)
        raise SystemExit(exc.exit_code) from exc
    _flush(engine.output)
    raise SystemExit(code)


def main() -> None:
    """Console entry point: load the config file, then run the command."""
    try:
        cfg = load_config()
    except (OSError, ValueError) as exc:
        click.echo(f"Error loading config: {exc}", err=True)
        raise SystemExit(1) from exc
    cli(obj=cfg, default_map=option_defaults(cfg))


if __name__ == "__main__":
    main()
