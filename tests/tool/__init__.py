"""Tests for the rabbitmq-operator command line tool."""
