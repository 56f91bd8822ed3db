"""Parsing, repair, episode filtering and serialization for episode import CSV files.

Submodules:
  patterns    -- compiled regex patterns and constant tuples
  config      -- environment-driven defaults (.env)
  schema      -- Document, ParseWarning and result Pydantic models
  errors      -- exception taxonomy
  tokenizer   -- quote-aware state-machine tokenizer and byte decoding
  validation  -- row width normalisation and integrity checks
  repair      -- best-effort record boundary recovery for corrupted files
  columns     -- header lookup and column-level transforms
  filtering   -- deletion-set construction and episode row removal
  serializer  -- escaping-correct text rendering
  compare     -- episode-number diff between two documents
  pipeline    -- parse_document / process_episodes entry points
"""
