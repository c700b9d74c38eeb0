from chembalance.cli import app

app(prog_name="chembalance")
