from . import catalog, models, requirements, growth, fertilizer, levels, logic, ticker, render
