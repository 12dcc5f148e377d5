"""
Permission-gated moderation actions for huskymod.

- **mod_result.py**: The ModResult enum reported by every gated action.

- **mod_helper.py**: The ModHelper action gate. Checks bot permissions, moderator
  permissions and role hierarchy before banning, unbanning, kicking or warning,
  and maps platform failures onto ModResult values.

- **modlog.py**: The moderation-log extension point handed to ModHelper, with a
  no-op default and a logger-backed sink.
"""
