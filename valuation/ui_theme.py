def inject_theme() -> str:
    return """
<style>
:root {
  --card-border: rgba(15,23,42,0.12);
  --card-bg: #ffffff;
}
.block-container {
  padding-top: 1rem;
  max-width: 1100px;
}
.hero, .verdict-card {
  border: 1px solid var(--card-border);
  border-radius: 14px;
  background: var(--card-bg);
  padding: 0.9rem 1.1rem;
  margin-bottom: 0.8rem;
}
.hero h2 { color: #0f172a; }
.verdict-card h3 { font-weight: 600; }
.badge {
  display: inline-block;
  border-radius: 6px;
  padding: 0.15rem 0.6rem;
  font-size: 0.85rem;
  font-weight: 600;
}
.badge-undervalued { background: #ccfbf1; color: #0f766e; }
.badge-overvalued { background: #fee2e2; color: #b91c1c; }
.badge-fairly_valued { background: #dbeafe; color: #1d4ed8; }
.badge-insufficient_data { background: #fef3c7; color: #92400e; }
</style>
"""
