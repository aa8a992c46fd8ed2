from docextract.cli import run

run()
