from aggbench.cli import app

app(prog_name="aggbench")
