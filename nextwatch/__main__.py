from nextwatch.main import run

run()
