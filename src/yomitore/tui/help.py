"""Static key reference shown by the help view."""

HELP_CONTENT = """\
yomitore - reading comprehension trainer

Read a generated passage, write a summary of it, and get it graded.
Every recorded pass extends your streak; a fail resets it.
Badges are awarded every 5 consecutive passes (up to 50)
and every 5 passes in total (up to 100).

MENU
  j / Down      next length
  k / Up        previous length
  Enter         generate a passage of the selected length
  r             report
  h             this help
  q             quit

TRAINING
  i / Enter     start writing the summary
  j / k         scroll the passage
  J / K         scroll the verdict
  PgUp / PgDn   scroll a page (the verdict while it is shown)
  e             show / hide the verdict
  Esc           hide the verdict
  n             next passage (after a verdict, or after a failed generation)
  m             back to the menu
  r             report
  h             this help
  q             quit

WRITING A SUMMARY
  Ctrl+S        submit for evaluation
  Esc           stop editing (the text is kept)
  Enter         new line
  Backspace     delete before the cursor
  Delete        delete under the cursor
  Arrows        move the cursor
  Home / End    start / end of the line

REPORT
  r / Esc       close

HELP
  j / k         scroll
  PgUp / PgDn   scroll a page
  h / Esc       close

Ctrl+C quits from anywhere. Results are saved after every verdict
and again when you quit.
"""

HELP_LINES = HELP_CONTENT.splitlines()
