# main.py
import logging
from pathlib import Path

import click

from codedigest.config import DEFAULT_GITIGNORE, DigestConfig
from codedigest.digest import CodeDigest
from codedigest.errors import CodeDigestError
from codedigest.output import OUTPUT_FORMATS, write_output
from codedigest.repo_info import resolve_repository

MEGABYTE = 1024 * 1024


def _split_patterns(value):
    """Comma separated patterns from --ignore; empty items are dropped."""
    if not value:
        return []
    return [item.strip() for item in value.split(",") if item.strip()]


@click.command()
@click.argument("directory", type=click.Path(exists=True, file_okay=False), default='.')
@click.option("-o", "--output", default="code-digest-output", show_default=True,
              help="Output directory for generated files.")
@click.option("-i", "--ignore", "ignore", default=None,
              help="Additional patterns to ignore (comma separated).")
@click.option("--gitignore", "gitignore", default=None, type=click.Path(dir_okay=False),
              help="Path to a custom .gitignore file (default: .gitignore inside DIRECTORY).")
@click.option("--max-size", type=click.FloatRange(min=0), default=10, show_default=True,
              help="Maximum file size in MB.")
@click.option("--include-binary", is_flag=True, help="Include binary files in the digest.")
@click.option("--include-dot", is_flag=True, help="Include dot files.")
@click.option("--max-depth", type=click.IntRange(min=0), default=None,
              help="Limit how deep the tree goes (0 = only the files directly inside DIRECTORY).")
@click.option("-f", "--format", "output_format", type=click.Choice(OUTPUT_FORMATS), default="both",
              show_default=True, help="Output format.")
@click.option("-p", "--print", "print_only", is_flag=True,
              help="Print the tree and file contents instead of writing files.")
@click.option("--repository", envvar="GITHUB_REPOSITORY", default=None, help="Repository name for the metadata.")
@click.option("--branch", envvar="GITHUB_REF", default=None, help="Branch for the metadata.")
@click.option("--commit", envvar="GITHUB_SHA", default=None, help="Commit for the metadata.")
@click.option("-v", "--verbose", is_flag=True, help="Log every skip decision to stderr.")
def cli(directory, output, ignore, gitignore, max_size, include_binary, include_dot, max_depth,
        output_format, print_only, repository, branch, commit, verbose):
    """
    Writes a filtered snapshot of DIRECTORY: a directory tree plus the
    contents of every text file, honouring .gitignore rules.
    """
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s - %(levelname)s - %(message)s",
    )

    root = str(Path(directory).resolve())
    # an explicit --gitignore is relative to where the command runs
    gitignore_path = str(Path(gitignore).resolve()) if gitignore else DEFAULT_GITIGNORE

    config = DigestConfig(
        ignore_patterns=_split_patterns(ignore),
        gitignore_path=gitignore_path,
        max_file_size=int(max_size * MEGABYTE),
        include_binary_files=include_binary,
        include_dot_files=include_dot,
        max_depth=max_depth,
    )

    try:
        click.echo(f"Analyzing directory: {root}", err=True)
        code_digest = CodeDigest(config).initialize(base_dir=root)
        info = resolve_repository(root, repository, branch, commit)
        result = code_digest.generate_digest(root, repository=info)

        if print_only:
            click.echo(result.tree.text)
            click.echo(result.files.text)
        else:
            for path in write_output(output, result, output_format):
                click.echo(f"✓ Written: {path}", err=True)
    except (CodeDigestError, OSError) as exc:
        click.secho(f"Error: {exc}", fg="red", err=True)
        raise SystemExit(1)

    stats = result.metadata.stats
    click.echo("\nDigest Summary:", err=True)
    click.echo(f"- Files processed: {stats.files_processed}", err=True)
    click.echo(f"- Files skipped: {stats.files_skipped}", err=True)
    click.echo(f"- Total size: {stats.total_size / MEGABYTE:.2f} MB", err=True)
    click.echo(f"- Execution time: {result.metadata.execution_time}", err=True)

    if stats.errors:
        click.secho("\nWarning: Some files could not be processed:", fg="yellow", err=True)
        for error in stats.errors:
            click.secho(f"- {error.path}: {error.error}", fg="yellow", err=True)


if __name__ == "__main__":
    cli()
