"""Remote browser sessions over the WebDriver wire protocols."""
