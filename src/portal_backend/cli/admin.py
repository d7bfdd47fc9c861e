import click

from portal_backend.cli.database import cli_session, database_url_option
from portal_backend.model.people import MAIN_ROLES, UNITS, Profile, Staff, Student
from portal_backend.repositories.base import DuplicateError
from portal_backend.repositories.people import UserRepository
from portal_backend.settings import settings


@click.command()
@click.option("--email", "-e", "email", prompt=True)
@click.option("--password", "-p", "password", prompt=True, hide_input=True, confirmation_prompt=True)
@click.option("--role", "-r", "role", type=click.Choice(MAIN_ROLES), required=True)
@click.option("--unit", "unit", type=click.Choice(UNITS), default=None)
@click.option("--first-name", "first_name", default=None)
@click.option("--last-name", "last_name", default=None)
@click.option("--staff-code", "staff_code", default=None, help="Creates a staff row")
@click.option("--matric-no", "matric_no", default=None, help="Creates a student row")
@database_url_option
def create_user(email, password, role, unit, first_name, last_name, staff_code, matric_no, database_url):
    """Create a user with its profile and, optionally, its staff or student row."""

    with cli_session(database_url) as db:
        users = UserRepository(db, settings.TOKEN_SECRET)

        if users.find_by_email(email) is not None:
            raise click.ClickException(f"User {email} already exists")

        try:
            user = users.create_account(email, password)
        except DuplicateError as e:
            raise click.ClickException(str(e))

        db.add(Profile(
            id=user.id,
            email=email,
            first_name=first_name,
            last_name=last_name,
            main_role=role,
            unit=unit
        ))

        if staff_code:
            db.add(Staff(profile_id=user.id, staff_code=staff_code))

        if matric_no:
            db.add(Student(profile_id=user.id, matric_no=matric_no))

        db.commit()

        click.echo(f"Created {role} {email} ({user.id})")


@click.command()
@click.option("--email", "-e", "email", prompt=True)
@click.option("--password", "-p", "password", prompt=True, hide_input=True, confirmation_prompt=True)
@database_url_option
def change_password(email, password, database_url):

    with cli_session(database_url) as db:
        users = UserRepository(db, settings.TOKEN_SECRET)
        user = users.find_by_email(email)

        if user is None:
            raise click.ClickException(f"User {email} not found")

        users.set_password(user, password)

        click.echo(f"Password updated for {email}")


@click.group()
def admin():
    pass

admin.add_command(create_user,"create-user")
admin.add_command(change_password,"password")
