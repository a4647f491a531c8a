from scriptorium.cli import app

app(prog_name="scriptorium")
