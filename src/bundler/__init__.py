"""Bundlers for TYPO3 extensions shipping their own vendor libraries.

Import the bundlers from their modules (``bundler.autoload_bundler``,
``bundler.dependency_bundler``); the entities live in ``bundler.entity``.
"""
