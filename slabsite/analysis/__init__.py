"""
slabsite.analysis

Interactive Plotly figures and the HTML report.
"""
