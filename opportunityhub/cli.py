import click
from opportunityhub import db


def register_commands(app):
    @app.cli.command('init-db')
    def init_db():
        """Create all database tables."""
        db.create_all()
        click.echo('Database initialized!')

    @app.cli.command()
    @click.option('--user-id', required=True, help='User to collect for')
    def collect(user_id):
        """Run one collection pass for a user."""
        from opportunityhub.collection.pipeline import run_collection

        result = run_collection(user_id)
        click.echo(f'Collected {result.collected} item(s), {result.verified} verified, '
                   f'from {result.sources_processed} source(s).')
        if result.failed_sources:
            click.echo(f'Failed sources: {", ".join(result.failed_sources)}')

    @app.cli.command('purge-drive-sessions')
    def purge_drive_sessions():
        """Delete expired Google Drive sessions."""
        from opportunityhub.drive import purge_expired_sessions

        purged = purge_expired_sessions()
        click.echo(f'Purged {purged} expired session(s).')
