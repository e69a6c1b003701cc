"""
Command Line Interface for meshinstall.
"""
import logging
import click
from ..PARSERS.context_parser import ContextParser
from ..RUNNERS.manifest_pipeline import ManifestPipeline
from ..CONVERTERS.to_yaml import ManifestYamlConverter
from ..MODELS.errors import ManifestError


@click.group()
@click.option('--verbose', '-v', is_flag=True, help='Enable debug logging')
@click.pass_context
def cli(ctx, verbose):
    """
    meshinstall - service mesh control plane installer.

    Generates the StatefulSet manifest of the Easegress control plane.
    """
    ctx.ensure_object(dict)
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format='%(asctime)s %(levelname)s %(name)s: %(message)s',
    )


@cli.command()
@click.option('--config', '-c', 'config_path', type=click.Path(), default=None, help='YAML configuration file')
@click.option('--env-file', type=click.Path(), default=None, help='.env file used for ${VAR} interpolation')
@click.option('--namespace', default=None, help='Target namespace')
@click.option('--replicas', type=int, default=None, help='Control plane replica count')
@click.option('--storage-class', default=None, help='Storage class of the data volume')
@click.option('--capacity', default=None, help='Data volume capacity, e.g. 10Gi')
@click.option('--out', '-o', default=None, help='Output directory; prints to stdout when omitted')
def render(config_path, env_file, namespace, replicas, storage_class, capacity, out):
    """Render the control plane StatefulSet manifest."""
    overrides = {
        'namespace': namespace,
        'replicas': replicas,
        'storage_class_name': storage_class,
        'persist_volume_capacity': capacity,
    }
    try:
        parser = ContextParser(env_file=env_file)
        if config_path:
            stage_ctx = parser.parse(config_path, overrides)
        else:
            stage_ctx = parser.parse_from_dict({}, overrides)
        manifest = ManifestPipeline().build(stage_ctx)
    except ManifestError as e:
        raise click.ClickException(str(e)) from e

    converter = ManifestYamlConverter(manifest)
    if out:
        path = converter.convert(out)
        click.echo(f"Manifest written to {path}")
    else:
        click.echo(converter.render(), nl=False)


def main():
    """
    Main entry point for the CLI.
    """
    cli(obj={})


if __name__ == '__main__':
    main()
