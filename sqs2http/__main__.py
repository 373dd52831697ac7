from sqs2http.cli.main import execute_app

execute_app()
