"""Command-line interface for tree mirror."""

import json
import logging
import sys
import click
from typing import Optional

from .core.runner import MirrorRunner
from .config.config_manager import ConfigManager
from .core.path_cursor import OVERFLOW_POLICIES
from .utils.formatters import format_date, format_summary


def setup_logging(level: str, log_file: Optional[str] = None):
    """Set up logging configuration."""
    # Convert string level to logging constant
    numeric_level = getattr(logging, level.upper(), None)
    if not isinstance(numeric_level, int):
        raise ValueError(f'Invalid log level: {level}')
    
    # Create formatter
    formatter = logging.Formatter(
        '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )
    
    # Set up root logger
    root_logger = logging.getLogger()
    root_logger.setLevel(numeric_level)
    
    # Clear existing handlers
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)
    
    # Console logging goes to stderr so that --output json stays parseable
    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setFormatter(formatter)
    console_handler.setLevel(numeric_level)
    root_logger.addHandler(console_handler)
    
    # Add file handler if specified
    if log_file:
        try:
            file_handler = logging.FileHandler(log_file)
            file_handler.setFormatter(formatter)
            file_handler.setLevel(numeric_level)
            root_logger.addHandler(file_handler)
        except Exception as e:
            click.echo(f"Warning: Could not set up file logging: {e}", err=True)


@click.group()
@click.option('--config', '-c', 'config_path',
              help='Path to configuration file')
@click.option('--log-level', default=None,
              type=click.Choice(['DEBUG', 'INFO', 'WARNING', 'ERROR'], case_sensitive=False),
              help='Logging level (default: from config, else INFO)')
@click.option('--log-file',
              help='Log file path')
@click.pass_context
def cli(ctx, config_path: Optional[str], log_level: Optional[str], log_file: Optional[str]):
    """Tree Mirror - incremental directory tree backups."""
    # Ensure context exists
    ctx.ensure_object(dict)
    
    # Set up logging first
    setup_logging(log_level or 'INFO', log_file)
    
    # Store configuration path
    ctx.obj['config_path'] = config_path
    ctx.obj['log_level'] = log_level


@cli.command()
@click.argument('source', required=False)
@click.argument('destination', required=False)
@click.option('--threshold', type=click.FloatRange(min=0),
              help='Timestamp difference in seconds above which a file is copied')
@click.option('--workers', type=click.IntRange(min=1),
              help='Threads used for top-level subfolders')
@click.option('--path-overflow', type=click.Choice(list(OVERFLOW_POLICIES)),
              help='What to do with paths longer than the supported maximum')
@click.option('--prompt/--no-prompt', default=None,
              help='Ask for missing folders (default: only on a terminal)')
@click.option('--output', '-o', type=click.Choice(['text', 'json']), default='text',
              help='Output format')
@click.option('--strict', is_flag=True,
              help='Exit with status 2 when the run recorded errors')
@click.pass_context
def run(ctx, source: Optional[str], destination: Optional[str], threshold: Optional[float],
        workers: Optional[int], path_overflow: Optional[str], prompt: Optional[bool],
        output: str, strict: bool):
    """Mirror SOURCE into a subfolder of DESTINATION."""
    try:
        runner = MirrorRunner(ctx.obj.get('config_path'), overrides={
            'threshold_seconds': threshold,
            'workers': workers,
            'path_overflow': path_overflow
        })
        
        if not ctx.obj.get('log_level'):
            level = runner.config_manager.get_logging_config()["level"].upper()
            for handler in [logging.getLogger()] + logging.getLogger().handlers:
                handler.setLevel(level)
        
        source, destination = runner.resolve_paths(source, destination)
        
        if prompt is None:
            prompt = sys.stdin.isatty()
        if prompt:
            folder = click.Path(exists=True, file_okay=False)
            if not source:
                source = click.prompt("Choose folder to backup...", type=folder)
            if not destination:
                destination = click.prompt("Choose backup destination...", type=folder)
        
        if output == 'text':
            click.echo("Starting backup...")
        
        results = runner.run(source, destination)
    
    except Exception as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)
    
    stats = results['stats']
    if output == 'json':
        click.echo(json.dumps({
            'source': results['source'],
            'destination': results['destination'],
            'log_file': results['log_file'],
            'started': results['started'].isoformat(),
            'finished': results['finished'].isoformat(),
            'elapsed_seconds': results['elapsed_seconds'],
            'disk': results['disk'],
            'stats': stats.as_dict()
        }, indent=2))
    else:
        click.echo(f"\n📂 {results['source']} -> {results['destination']}")
        click.echo(format_summary(stats, results['elapsed_seconds'], results['disk'], indent="  "))
        click.echo(f"\n📄 Log file: {results['log_file']}")
        click.echo(f"🕒 Completed at: {format_date(results['finished'])}")
    
    if strict and stats.error_count:
        sys.exit(2)


@cli.command()
@click.pass_context
def validate_config(ctx):
    """Validate configuration file."""
    try:
        config_manager = ConfigManager(ctx.obj.get('config_path'))
        config_manager.load_config()
        
        click.echo("✅ Configuration loaded successfully")
        
        paths = config_manager.get_paths_config()
        mirror = config_manager.get_mirror_config()
        logging_config = config_manager.get_logging_config()
        
        click.echo(f"\n📊 Configuration Summary:")
        click.echo(f"   Config file: {config_manager.config_file or 'none (defaults)'}")
        click.echo(f"   Source: {paths.get('source') or 'not set'}")
        click.echo(f"   Destination: {paths.get('destination') or 'not set'}")
        click.echo(f"   Default paths file: {paths.get('default_paths_file')}")
        click.echo(f"   Threshold: {mirror['threshold_seconds']} seconds")
        click.echo(f"   Workers: {mirror['workers']}")
        click.echo(f"   Path overflow: {mirror['path_overflow']} (max {mirror['max_path_length']})")
        click.echo(f"   Log directory: {logging_config['log_dir']}")
        
        defaults = config_manager.load_default_paths()
        if defaults:
            click.echo(f"   📁 Default paths usable: {defaults[0]} -> {defaults[1]}")
    
    except Exception as e:
        click.echo(f"❌ Configuration validation failed: {e}", err=True)
        sys.exit(1)


def main():
    """Main CLI entry point."""
    cli()


if __name__ == '__main__':
    main()
