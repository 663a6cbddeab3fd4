import asyncio
import functools
import json
from typing import Any, Awaitable, Callable, List, Optional, Tuple, TypeVar

import click
import yaml

from kubefluent._cogs.clients import auth, errors, executing, logins
from kubefluent._cogs.structs import credentials, filtering, kinds
from kubefluent._core import builders, loggers

_T = TypeVar('_T')


class LogFormatParamType(click.Choice):

    def __init__(self) -> None:
        super().__init__(choices=[v.name.lower() for v in loggers.LogFormat])

    def convert(self, value: Any, param: Any, ctx: Any) -> loggers.LogFormat:
        if isinstance(value, loggers.LogFormat):
            return value
        name: str = super().convert(value, param, ctx)
        return loggers.LogFormat[name.upper()]


class KindParamType(click.ParamType):
    """ A kind by its model name, e.g. ``Pod``, ``V1Pod``, or ``Deployment``. """
    name = 'kind'

    def convert(self, value: Any, param: Any, ctx: Any) -> kinds.ResourceKind:
        if isinstance(value, kinds.ResourceKind):
            return value
        resolved = kinds.get_default_registry().resolve(value)
        if resolved is None:
            self.fail(f"Unknown kind: {value!r}", param, ctx)
        return resolved


class SelectorParamType(click.ParamType):
    """ A selector term: ``key=value``, or a bare ``key`` for the existence check. """
    name = 'selector'

    def convert(self, value: Any, param: Any, ctx: Any) -> Tuple[str, str]:
        if isinstance(value, tuple):
            return value
        key, _, val = value.partition('=')
        if not key:
            self.fail(f"Empty key in the selector: {value!r}", param, ctx)
        return key, val


def logging_options(fn: Callable[..., Any]) -> Callable[..., Any]:
    """ A decorator to configure logging in all commands the same way."""
    @click.option('-v', '--verbose', is_flag=True)
    @click.option('-d', '--debug', is_flag=True)
    @click.option('-q', '--quiet', is_flag=True)
    @click.option('--log-format', type=LogFormatParamType(), default='plain')
    @click.option('--log-refkey', type=str)
    @click.option('--log-prefix/--no-log-prefix', default=None)
    @functools.wraps(fn)  # to preserve other opts/args
    def wrapper(verbose: bool, quiet: bool, debug: bool,
                log_format: loggers.LogFormat = loggers.LogFormat.PLAIN,
                log_prefix: Optional[bool] = False,
                log_refkey: Optional[str] = None,
                *args: Any, **kwargs: Any) -> Any:
        loggers.configure(debug=debug, verbose=verbose, quiet=quiet,
                          log_format=log_format, log_refkey=log_refkey, log_prefix=log_prefix)
        return fn(*args, **kwargs)

    return wrapper


def output_options(fn: Callable[..., Any]) -> Callable[..., Any]:
    """ A decorator to print the command's result in the requested format. """
    @click.option('-o', '--output', type=click.Choice(['yaml', 'json']), default='yaml')
    @functools.wraps(fn)  # to preserve other opts/args
    def wrapper(output: str, *args: Any, **kwargs: Any) -> Any:
        result = fn(*args, **kwargs)
        if result is None:
            return
        elif isinstance(result, str):
            click.echo(result)
        elif output == 'json':
            click.echo(json.dumps(result, indent=2))
        elif isinstance(result, list):
            click.echo(yaml.safe_dump_all(result, sort_keys=False), nl=False)
        else:
            click.echo(yaml.safe_dump(result, sort_keys=False), nl=False)

    return wrapper


def run(fn: Callable[[], Awaitable[_T]]) -> _T:
    """
    Run a coroutine in one API context for the whole command.

    The expected failures are reported as the CLI errors, without the tracebacks.
    """
    async def _run() -> _T:
        info = logins.discover()
        async with auth.APIContext(info) as context:
            with auth.use_context(context):
                return await fn()

    try:
        return asyncio.run(_run())
    except credentials.LoginError as e:
        raise click.ClickException(str(e))
    except errors.APIError as e:
        raise click.ClickException(f"{e.status} {e.status_text or ''}: {e.message or e.data}".strip())
    except (filtering.NamespaceAlreadySpecified, filtering.NameAlreadySpecified,
            filtering.NameNotSpecified, executing.SubresourceNotSupported,
            kinds.KindNotSpecified, kinds.VersionNotSpecified) as e:
        raise click.UsageError(str(e))


@click.version_option(prog_name='kubefluent')
@click.group(name='kubefluent', context_settings=dict(
    auto_envvar_prefix='KUBEFLUENT',
))
def main() -> None:
    pass


@main.command()
@logging_options
@output_options
@click.option('-n', '--namespace', type=str)
@click.option('-l', '--label', 'labels', type=SelectorParamType(), multiple=True)
@click.option('--field', 'fields', type=SelectorParamType(), multiple=True)
@click.argument('kind', type=KindParamType())
@click.argument('name', required=False)
def get(
        kind: kinds.ResourceKind,
        name: Optional[str],
        namespace: Optional[str],
        labels: List[Tuple[str, str]],
        fields: List[Tuple[str, str]],
) -> Any:
    """ Get one object by name, or a list of objects of a kind. """
    builder = builders.K8s(kind)
    if namespace:
        builder = builder.in_namespace(namespace)
    for key, value in labels:
        builder = builder.with_label(key, value)
    for key, value in fields:
        builder = builder.with_field(key, value)
    return run(lambda: builder.get(name))


@main.command()
@logging_options
@output_options
@click.option('-f', '--filename', 'path', type=click.Path(exists=True, dir_okay=False), required=True)
@click.option('-n', '--namespace', type=str)
@click.option('--force', is_flag=True)
def apply(
        path: str,
        namespace: Optional[str],
        force: bool,
) -> Any:
    """ Apply the objects from a YAML file with the server-side apply. """
    with open(path, encoding='utf-8') as f:
        objs = [obj for obj in yaml.safe_load_all(f) if obj]

    async def _apply_all() -> List[Any]:
        results = []
        for obj in objs:
            kind = kinds.guess_kind(obj.get('apiVersion', ''), obj.get('kind', ''))
            builder = builders.K8s(kind)
            if namespace and not obj.get('metadata', {}).get('namespace'):
                builder = builder.in_namespace(namespace)
            results.append(await builder.apply(obj, executing.ApplyOptions(force=force)))
        return results

    return run(_apply_all)


@main.command()
@logging_options
@click.option('-n', '--namespace', type=str)
@click.argument('kind', type=KindParamType())
@click.argument('name')
def delete(
        kind: kinds.ResourceKind,
        name: str,
        namespace: Optional[str],
) -> None:
    """ Delete an object by name; an absent object is not an error. """
    filters = filtering.Filters(name=name, namespace=namespace or None)

    # Decided by the status: an empty JSON body parses as None.
    async def _delete() -> bool:
        try:
            await executing.execute(kind, filters, executing.Operation.DELETE,
                                    logger=builders.requests_logger)
        except errors.APINotFoundError:
            return False
        return True

    deleted = run(_delete)
    click.echo(f"{kind.kind} {name} {'deleted' if deleted else 'not found'}.")


@main.command()
@logging_options
@output_options
@click.option('-X', '--method', type=str, default='GET')
@click.argument('path')
def raw(
        path: str,
        method: str,
) -> Any:
    """ Send a request to an arbitrary path of the API, e.g. ``/version``. """
    return run(lambda: builders.K8s('').raw(path, method))
