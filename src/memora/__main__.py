from memora.interface.cli import app

app(prog_name="memora")
