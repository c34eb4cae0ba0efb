"""Command line tool for rabbitmq-operator."""
