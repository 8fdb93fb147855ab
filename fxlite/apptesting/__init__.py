"""Helpers for tests that run an application in a child process and talk to it."""