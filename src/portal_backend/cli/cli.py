import click

from .admin import admin
from .database import init_db


@click.group()
def cli():
    pass

cli.add_command(init_db,"init-db")
cli.add_command(admin,"admin")

if __name__ == '__main__':
    cli()
