from jobwindow.cli import app

app()
