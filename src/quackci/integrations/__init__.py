"""
quackci.integrations - External Service Layer
===============================================

    - circleci: BaseCIClient, CircleCIClient (HTTP), MockCIClient (tests)
"""
