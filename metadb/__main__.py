from metadb.cli import app

app(prog_name="metadb")
