"""
Error types shared by the FNE client, the local stores and the routes.
"""


class UpstreamFetchError(Exception):
  """A collaborator could not produce the data a view needs."""


class FneError(UpstreamFetchError):
  """The FNE REST API was unreachable or answered with something unusable."""


class InclusionStoreError(UpstreamFetchError):
  """The peer map inclusion list could not be read or written."""


class StoreError(Exception):
  """A local JSON store could not be read or written."""


class RulesError(Exception):
  """The talkgroup rules file could not be read or written."""
