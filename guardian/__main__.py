from guardian.main import run

run()
