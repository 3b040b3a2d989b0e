from app.api.main import run

run()
