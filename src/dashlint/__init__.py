"""dashlint - lint Grafana dashboards against house conventions."""
