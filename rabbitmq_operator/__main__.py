"""Entry point for running the command line tool as a module."""

from rabbitmq_operator.tool.rabbitmq_operator import main

if __name__ == "__main__":
    main()
